import unittest

from ad_helper.ad_utils import (
    base_dn_to_domain,
    get_common_name,
    get_dcs_from_distinguished_name,
    get_dcs_from_domain,
    get_ldap_path,
    get_name_from_cn,
)

JOE_DN = "CN=Public\\, Joe,OU=Partners,DC=oit,DC=example,DC=com"


class DistinguishedNameTests(unittest.TestCase):
    def test_common_name(self):
        self.assertEqual(get_common_name("CN=IT Web Team,OU=Groups,DC=oit,DC=example,DC=com"), "IT Web Team")
        self.assertEqual(get_common_name("OU=Groups,cn=Late,DC=com"), "Late")
        self.assertIsNone(get_common_name("OU=Groups,DC=com"))

    def test_dcs_from_domain(self):
        self.assertEqual(get_dcs_from_domain("oit.example.com"), "DC=oit,DC=example,DC=com")
        with self.assertRaises(ValueError):
            get_dcs_from_domain("")

    def test_dcs_from_distinguished_name(self):
        self.assertEqual(get_dcs_from_distinguished_name(JOE_DN), "DC=oit,DC=example,DC=com")
        with self.assertRaises(ValueError):
            get_dcs_from_distinguished_name("")

    def test_ldap_path(self):
        self.assertEqual(get_ldap_path(JOE_DN), "LDAP://DC=oit,DC=example,DC=com")
        with self.assertRaises(ValueError):
            get_ldap_path("  ")

    def test_name_from_cn(self):
        self.assertEqual(get_name_from_cn(JOE_DN), "Public, Joe")
        with self.assertRaises(ValueError):
            get_name_from_cn("CN=single")
        with self.assertRaises(ValueError):
            get_name_from_cn("")

    def test_base_dn_to_domain(self):
        self.assertEqual(base_dn_to_domain("OU=Staff,DC=oit,DC=example,DC=com"), "oit.example.com")
        self.assertEqual(base_dn_to_domain(""), "")


if __name__ == "__main__":
    unittest.main()
