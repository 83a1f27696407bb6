import socket
import unittest
import uuid
from dataclasses import fields
from unittest import mock

from ad_helper.ad import attributes as attrs
from ad_helper.ad.models import SearchResult
from ad_helper.ad.records import ComputerRecord, GroupRecord, UserRecord, UserWithManagerRecord
from ad_helper.errors import HostResolutionError
from ad_helper.utils import net

EMPTY = SearchResult(path="CN=Nobody,DC=oit,DC=example,DC=com", properties={})


class RecordTests(unittest.TestCase):
    def test_missing_attributes_map_to_empty_strings(self):
        for record_type in (UserRecord, GroupRecord):
            record = record_type.from_result(EMPTY)
            for f in fields(record):
                if f.name == "members":
                    self.assertEqual(record.members, ())
                else:
                    self.assertEqual(getattr(record, f.name), "", f"{record_type.__name__}.{f.name}")

    def test_user_record(self):
        result = SearchResult(
            path="CN=Public\\, Joe,OU=Partners,DC=oit,DC=example,DC=com",
            properties={
                attrs.COMMON_NAME: [b"Joe Public"],
                attrs.LOGIN_NAME: [b"jpublic"],
                attrs.MSDS_PRINCIPAL_NAME: [b"oit\\jpublic"],
                attrs.FIRST_NAME: [b"Joe"],
                attrs.LAST_NAME: [b"Public"],
                attrs.MOBILE_PHONE: [b"555-0100"],
            },
        )
        user = UserRecord.from_result(result)
        self.assertEqual(user.domain, "OIT")
        self.assertEqual(user.full_sam_account_name, "OIT\\JPUBLIC")
        self.assertEqual(user.sam_account_name, "JPUBLIC")
        self.assertEqual(user.full_name, "Joe Public")
        self.assertEqual(user.mobile_phone, "555-0100")

    def test_user_with_manager_attributes(self):
        self.assertEqual(UserWithManagerRecord.ATTRIBUTES[:-1], UserRecord.ATTRIBUTES)
        self.assertEqual(UserWithManagerRecord.ATTRIBUTES[-1], attrs.MANAGER)

        record = UserWithManagerRecord.from_result(EMPTY)
        self.assertEqual(record.manager_distinguished_name, "")
        self.assertIsNone(record.manager)

        boss = UserRecord(full_name="Big Boss")
        self.assertEqual(record.with_manager(boss).manager, boss)
        self.assertIsNone(record.manager)

    def test_group_record(self):
        result = SearchResult(
            path="",
            properties={attrs.LOGIN_NAME: [b"webteam"], attrs.MEMBER: [b"CN=A,DC=com", b"CN=B,DC=com"]},
        )
        group = GroupRecord.from_result(result)
        self.assertEqual(group.sam_account_name, "WEBTEAM")
        self.assertEqual(group.members, ("CN=A,DC=com", "CN=B,DC=com"))


class ComputerRecordTests(unittest.TestCase):
    def setUp(self):
        self.guid = "6f9619ff-8b86-d011-b42d-00c04fc964ff"
        self.result = SearchResult(
            path="CN=WEB01,OU=Servers,DC=oit,DC=example,DC=com",
            properties={
                attrs.COMMON_NAME: [b"WEB01"],
                attrs.DNS_HOST_NAME: [b"web01.oit.example.com"],
                attrs.OBJECT_GUID: [uuid.UUID(self.guid).bytes_le],
                attrs.OPERATING_SYSTEM: [b"Windows Server 2022 Standard"],
            },
        )

    @mock.patch("ad_helper.ad.records.resolve_host", return_value="10.1.2.3")
    def test_resolves_host(self, resolve_host):
        computer = ComputerRecord.from_result(self.result, "10.0.0.53")
        resolve_host.assert_called_once_with("web01.oit.example.com", "10.0.0.53")
        self.assertEqual(computer.server_ip, "10.1.2.3")
        self.assertEqual(computer.object_guid, self.guid)
        self.assertEqual(computer.operating_system, "Windows Server 2022 Standard")

    @mock.patch("ad_helper.ad.records.resolve_host", side_effect=HostResolutionError("web01.oit.example.com"))
    def test_resolution_failure_propagates(self, _resolve_host):
        with self.assertRaises(HostResolutionError):
            ComputerRecord.from_result(self.result)


class ResolveHostTests(unittest.TestCase):
    @mock.patch.object(net.socket, "getaddrinfo", return_value=[(2, 1, 6, "", ("10.9.8.7", 0))])
    def test_system_resolver(self, getaddrinfo):
        self.assertEqual(net.resolve_host("web01.oit.example.com"), "10.9.8.7")
        getaddrinfo.assert_called_once_with("web01.oit.example.com", None)

    @mock.patch.object(net.socket, "getaddrinfo", side_effect=socket.gaierror("no such host"))
    def test_unresolvable(self, _getaddrinfo):
        with self.assertRaises(HostResolutionError) as ctx:
            net.resolve_host("nowhere.invalid")
        self.assertEqual(ctx.exception.hostname, "nowhere.invalid")

    def test_empty_name(self):
        with self.assertRaises(HostResolutionError):
            net.resolve_host("")

    @mock.patch.object(net.socket, "getaddrinfo")
    @mock.patch.object(net, "resolve_hostname_with_dns", return_value="10.0.0.9")
    def test_configured_dns_server_first(self, with_dns, getaddrinfo):
        self.assertEqual(net.resolve_host("web01", "10.0.0.53"), "10.0.0.9")
        with_dns.assert_called_once_with("web01", "10.0.0.53")
        getaddrinfo.assert_not_called()

    @mock.patch.object(net.socket, "getaddrinfo", return_value=[(2, 1, 6, "", ("10.9.8.7", 0))])
    @mock.patch.object(net, "resolve_hostname_with_dns", return_value=None)
    def test_falls_back_to_system_resolver(self, _with_dns, _getaddrinfo):
        self.assertEqual(net.resolve_host("web01", "10.0.0.53"), "10.9.8.7")


if __name__ == "__main__":
    unittest.main()
