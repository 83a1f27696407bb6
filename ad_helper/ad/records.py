from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Optional

from . import attributes as attrs
from .mapper import (
    get_attribute,
    get_attribute_as_guid,
    get_attribute_as_sid,
    get_attribute_collection,
    get_domain,
)
from .models import SearchResult
from ..utils.net import resolve_host


@dataclass(frozen=True)
class UserRecord:
    object_guid: str = ""
    object_sid: str = ""
    employee_id: str = ""
    employee_number: str = ""
    user_account_control: str = ""
    domain: str = ""
    full_sam_account_name: str = ""
    sam_account_name: str = ""
    display_name: str = ""
    distinguished_name: str = ""
    full_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    email: str = ""
    work_phone: str = ""
    mobile_phone: str = ""
    title: str = ""
    office: str = ""
    department: str = ""
    company: str = ""
    city: str = ""
    state: str = ""

    ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        attrs.COMMON_NAME,
        attrs.DISPLAY_NAME,
        attrs.DISTINGUISHED_NAME,
        attrs.OBJECT_GUID,
        attrs.OBJECT_SID,
        attrs.EMPLOYEE_ID,
        attrs.EMPLOYEE_NUMBER,
        attrs.USER_ACCOUNT_CONTROL,
        attrs.USER_PRINCIPAL_NAME,
        attrs.MSDS_PRINCIPAL_NAME,
        attrs.EMAIL_ADDRESS,
        attrs.FIRST_NAME,
        attrs.LAST_NAME,
        attrs.MIDDLE_NAME,
        attrs.LOGIN_NAME,
        attrs.TELEPHONE_NUMBER,
        attrs.MOBILE_PHONE,
        attrs.TITLE,
        attrs.OFFICE,
        attrs.DEPARTMENT,
        attrs.COMPANY,
        attrs.CITY,
        attrs.STATE,
    )

    @classmethod
    def from_result(cls, result: SearchResult) -> "UserRecord":
        return cls(
            object_guid=get_attribute_as_guid(result, attrs.OBJECT_GUID),
            object_sid=get_attribute_as_sid(result, attrs.OBJECT_SID),
            employee_id=get_attribute(result, attrs.EMPLOYEE_ID),
            employee_number=get_attribute(result, attrs.EMPLOYEE_NUMBER),
            user_account_control=get_attribute(result, attrs.USER_ACCOUNT_CONTROL),
            domain=get_domain(result),
            full_sam_account_name=get_attribute(result, attrs.MSDS_PRINCIPAL_NAME).upper(),
            sam_account_name=get_attribute(result, attrs.LOGIN_NAME).upper(),
            display_name=get_attribute(result, attrs.DISPLAY_NAME),
            distinguished_name=get_attribute(result, attrs.DISTINGUISHED_NAME),
            full_name=get_attribute(result, attrs.COMMON_NAME),
            first_name=get_attribute(result, attrs.FIRST_NAME),
            middle_name=get_attribute(result, attrs.MIDDLE_NAME),
            last_name=get_attribute(result, attrs.LAST_NAME),
            title=get_attribute(result, attrs.TITLE),
            email=get_attribute(result, attrs.EMAIL_ADDRESS),
            work_phone=get_attribute(result, attrs.TELEPHONE_NUMBER),
            mobile_phone=get_attribute(result, attrs.MOBILE_PHONE),
            office=get_attribute(result, attrs.OFFICE),
            department=get_attribute(result, attrs.DEPARTMENT),
            company=get_attribute(result, attrs.COMPANY),
            city=get_attribute(result, attrs.CITY),
            state=get_attribute(result, attrs.STATE),
        )


@dataclass(frozen=True)
class UserWithManagerRecord:
    """A user plus the DN of their manager and, once looked up, the manager."""

    user: UserRecord
    manager_distinguished_name: str = ""
    manager: Optional[UserRecord] = None

    ATTRIBUTES: ClassVar[tuple[str, ...]] = UserRecord.ATTRIBUTES + (attrs.MANAGER,)

    @classmethod
    def from_result(cls, result: SearchResult) -> "UserWithManagerRecord":
        return cls(
            user=UserRecord.from_result(result),
            manager_distinguished_name=get_attribute(result, attrs.MANAGER),
        )

    def with_manager(self, manager: Optional[UserRecord]) -> "UserWithManagerRecord":
        return replace(self, manager=manager)


@dataclass(frozen=True)
class GroupRecord:
    canonical_name: str = ""
    cn: str = ""
    description: str = ""
    display_name: str = ""
    distinguished_name: str = ""
    group_category: str = ""
    group_scope: str = ""
    managed_by: str = ""
    members: tuple[str, ...] = ()
    object_guid: str = ""
    object_sid: str = ""
    sam_account_name: str = ""

    ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        attrs.CANONICAL_NAME,
        attrs.COMMON_NAME,
        attrs.DESCRIPTION,
        attrs.DISPLAY_NAME,
        attrs.DISTINGUISHED_NAME,
        attrs.GROUP_CATEGORY,
        attrs.GROUP_SCOPE,
        attrs.MANAGED_BY,
        attrs.MEMBER,
        attrs.OBJECT_GUID,
        attrs.OBJECT_SID,
        attrs.LOGIN_NAME,
    )

    @classmethod
    def from_result(cls, result: SearchResult) -> "GroupRecord":
        return cls(
            canonical_name=get_attribute(result, attrs.CANONICAL_NAME),
            cn=get_attribute(result, attrs.COMMON_NAME),
            description=get_attribute(result, attrs.DESCRIPTION),
            display_name=get_attribute(result, attrs.DISPLAY_NAME),
            distinguished_name=get_attribute(result, attrs.DISTINGUISHED_NAME),
            group_category=get_attribute(result, attrs.GROUP_CATEGORY),
            group_scope=get_attribute(result, attrs.GROUP_SCOPE),
            managed_by=get_attribute(result, attrs.MANAGED_BY),
            members=tuple(get_attribute_collection(result, attrs.MEMBER)),
            object_guid=get_attribute_as_guid(result, attrs.OBJECT_GUID),
            object_sid=get_attribute_as_sid(result, attrs.OBJECT_SID),
            sam_account_name=get_attribute(result, attrs.LOGIN_NAME).upper(),
        )


@dataclass(frozen=True)
class ComputerRecord:
    cn: str = ""
    dns_host_name: str = ""
    distinguished_name: str = ""
    object_guid: str = ""
    description: str = ""
    operating_system: str = ""
    operating_system_version: str = ""
    server_ip: str = ""

    ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        attrs.COMMON_NAME,
        attrs.DNS_HOST_NAME,
        attrs.DISTINGUISHED_NAME,
        attrs.OBJECT_GUID,
        attrs.DESCRIPTION,
        attrs.OPERATING_SYSTEM,
        attrs.OPERATING_SYSTEM_VERSION,
    )

    @classmethod
    def from_result(cls, result: SearchResult, dns_server: str = "") -> "ComputerRecord":
        """Map the entry and resolve its dNSHostName (HostResolutionError on failure)."""
        dns_host_name = get_attribute(result, attrs.DNS_HOST_NAME)
        return cls(
            cn=get_attribute(result, attrs.COMMON_NAME),
            dns_host_name=dns_host_name,
            distinguished_name=get_attribute(result, attrs.DISTINGUISHED_NAME),
            object_guid=get_attribute_as_guid(result, attrs.OBJECT_GUID),
            description=get_attribute(result, attrs.DESCRIPTION),
            operating_system=get_attribute(result, attrs.OPERATING_SYSTEM),
            operating_system_version=get_attribute(result, attrs.OPERATING_SYSTEM_VERSION),
            server_ip=resolve_host(dns_host_name, dns_server),
        )
