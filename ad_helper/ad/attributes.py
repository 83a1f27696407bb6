"""Active Directory attribute names."""

CANONICAL_NAME = "canonicalName"
CITY = "l"
COMMON_NAME = "cn"
COMPANY = "company"
DEPARTMENT = "department"
DESCRIPTION = "description"
DISPLAY_NAME = "displayName"
DISTINGUISHED_NAME = "distinguishedName"
DNS_HOST_NAME = "dNSHostName"
EMAIL_ADDRESS = "mail"
EMPLOYEE_ID = "employeeID"
EMPLOYEE_NUMBER = "employeeNumber"
FIRST_NAME = "givenName"
GROUP_CATEGORY = "groupCategory"
GROUP_SCOPE = "groupScope"
LAST_NAME = "sn"
LOGIN_NAME = "sAMAccountName"
MANAGED_BY = "managedBy"
MANAGER = "manager"
MEMBER = "member"
MEMBER_OF = "memberOf"
MIDDLE_NAME = "initials"
MOBILE_PHONE = "mobile"
MSDS_PRINCIPAL_NAME = "msDS-PrincipalName"
OBJECT_GUID = "objectGUID"
OBJECT_SID = "objectSid"
OFFICE = "physicalDeliveryOfficeName"
OPERATING_SYSTEM = "operatingSystem"
OPERATING_SYSTEM_VERSION = "operatingSystemVersion"
PROXY_ADDRESSES = "proxyAddresses"
PWD_LAST_SET = "pwdLastSet"
STATE = "st"
TELEPHONE_NUMBER = "telephoneNumber"
TITLE = "title"
USER_ACCOUNT_CONTROL = "userAccountControl"
USER_PRINCIPAL_NAME = "userPrincipalName"

# LDAP_MATCHING_RULE_IN_CHAIN: transitive group membership.
MATCHING_RULE_IN_CHAIN = "1.2.840.113556.1.4.1941"
