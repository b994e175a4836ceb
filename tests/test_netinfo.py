"""Tests for engine.netinfo -- best-effort IP / ISP lookup."""

import asyncio
import json
import unittest

import aiohttp

from engine.exceptions import NetworkInfoError
from engine.netinfo import NetworkInfoLookup, parse_network_info
from fakes import FakeHttp, FakeResponse


class TestParseNetworkInfo(unittest.TestCase):
    def test_nested_isp_preferred(self):
        info = parse_network_info({
            "success": True, "ip": "1.2.3.4", "isp": "Top",
            "connection": {"isp": "Nested"},
        })
        self.assertEqual(info.ip, "1.2.3.4")
        self.assertEqual(info.isp, "Nested")

    def test_top_level_fallback(self):
        info = parse_network_info({"success": True, "ip": "1.2.3.4", "isp": "Top"})
        self.assertEqual(info.isp, "Top")

    def test_empty_nested_falls_back(self):
        info = parse_network_info({
            "success": True, "ip": "1.2.3.4", "isp": "Top", "connection": {"isp": ""},
        })
        self.assertEqual(info.isp, "Top")

    def test_unknown_isp(self):
        info = parse_network_info({"success": True, "ip": "1.2.3.4", "connection": {}})
        self.assertEqual(info.isp, "Unknown ISP")

    def test_truthy_success(self):
        info = parse_network_info({"success": 1, "ip": "1.2.3.4", "isp": "Top"})
        self.assertEqual(info.ip, "1.2.3.4")

    def test_unsuccessful(self):
        with self.assertRaises(NetworkInfoError):
            parse_network_info({"success": False, "message": "Reserved range"})

    def test_missing_ip(self):
        with self.assertRaises(NetworkInfoError):
            parse_network_info({"success": True})

    def test_not_an_object(self):
        with self.assertRaises(NetworkInfoError):
            parse_network_info(["success"])


class TestNetworkInfoLookup(unittest.IsolatedAsyncioTestCase):
    async def test_success(self):
        http = FakeHttp(FakeResponse(payload={
            "success": True, "ip": "5.6.7.8", "connection": {"isp": "Example Net"},
        }))
        info = await NetworkInfoLookup(url="https://geo.test/").lookup(http)
        self.assertEqual(info.ip, "5.6.7.8")
        self.assertEqual(info.isp, "Example Net")
        self.assertEqual(http.calls[0][:2], ("GET", "https://geo.test/"))

    async def test_network_error(self):
        http = FakeHttp(aiohttp.ClientConnectionError("refused"))
        self.assertIsNone(await NetworkInfoLookup().lookup(http))

    async def test_timeout(self):
        http = FakeHttp(asyncio.TimeoutError())
        self.assertIsNone(await NetworkInfoLookup().lookup(http))

    async def test_bad_status(self):
        http = FakeHttp(FakeResponse(status=500, payload={"success": True, "ip": "1.1.1.1"}))
        self.assertIsNone(await NetworkInfoLookup().lookup(http))

    async def test_malformed_json(self):
        err = json.JSONDecodeError("Expecting value", "<html>", 0)
        http = FakeHttp(FakeResponse(json_error=err))
        self.assertIsNone(await NetworkInfoLookup().lookup(http))

    async def test_unsuccessful_payload(self):
        http = FakeHttp(FakeResponse(payload={"success": False}))
        self.assertIsNone(await NetworkInfoLookup().lookup(http))

    async def test_single_request(self):
        http = FakeHttp(OSError("down"))
        await NetworkInfoLookup().lookup(http)
        self.assertEqual(len(http.calls), 1)


if __name__ == "__main__":
    unittest.main()
