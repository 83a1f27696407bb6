import unittest

from ad_helper.utils.validation import (
    is_valid_alpha,
    is_valid_alphanumeric,
    is_valid_email,
    is_valid_name,
)


class ValidationTests(unittest.TestCase):
    def test_email_shape(self):
        self.assertTrue(is_valid_email("a@b.co"))
        self.assertTrue(is_valid_email("joe.o'public@oit.example.com"))
        self.assertFalse(is_valid_email("not-an-email"))
        self.assertFalse(is_valid_email("a@b"))
        self.assertFalse(is_valid_email(""))
        self.assertFalse(is_valid_email(None))

    def test_alphanumeric(self):
        self.assertFalse(is_valid_alphanumeric(""))
        self.assertFalse(is_valid_alphanumeric(None))
        self.assertFalse(is_valid_alphanumeric("()=*"))
        self.assertTrue(is_valid_alphanumeric("jpublic"))
        self.assertTrue(is_valid_alphanumeric("42"))
        self.assertTrue(is_valid_alphanumeric("Zoë"))

    def test_partial_match_accepts_ldap_filters(self):
        """Any allowed character anywhere is enough."""
        self.assertTrue(is_valid_alphanumeric("(&(objectClass=user)(sAMAccountName=jpublic))"))
        self.assertTrue(is_valid_alpha("12a"))

    def test_alpha(self):
        self.assertFalse(is_valid_alpha("1234"))
        self.assertTrue(is_valid_alpha("Ångström"))

    def test_name(self):
        self.assertTrue(is_valid_name("O'Neil-Smith, Jr."))
        self.assertTrue(is_valid_name("-"))
        self.assertFalse(is_valid_name("!!!"))
        self.assertFalse(is_valid_name(""))


if __name__ == "__main__":
    unittest.main()
