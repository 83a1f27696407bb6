from __future__ import annotations

import logging
import ssl
import threading
from typing import Any, Iterable, Optional

from ldap3 import (
    ANONYMOUS,
    KERBEROS,
    NONE,
    NTLM,
    SASL,
    SIMPLE,
    SUBTREE,
    ALL_ATTRIBUTES,
    Connection,
    Server,
    Tls,
)
from ldap3.core.exceptions import LDAPException

from . import attributes as attrs
from .mapper import get_attribute, get_attribute_collection
from .models import AuthenticationTypes, SearchResult, SearcherConfig
from .records import ComputerRecord, GroupRecord, UserRecord, UserWithManagerRecord
from .utils import escape_ldap_filter_value, guid_to_octet_string
from ..ad_utils import get_common_name, get_ldap_path, get_name_from_cn
from ..env_settings import EnvSettings, get_env
from ..errors import DirectoryAccessError, SearcherClosedError
from ..utils.validation import is_valid_alphanumeric, is_valid_email
from ..utils.workers import async_twin, configure_workers

log = logging.getLogger(__name__)

USER_BY_SAM_FILTER = "(&(objectClass=user)(sAMAccountName={sam}))"
USER_BY_EMAIL_FILTER = "(&(objectClass=user)(proxyAddresses=smtp:{email}))"
USER_BY_DN_FILTER = "(&(objectClass=user)(distinguishedName={dn}))"
USERS_BY_NAME_FILTER = "(&(objectClass=user)(sn={last}*)(givenName={first}*))"
GROUP_BY_DN_FILTER = "(&(objectClass=group)(distinguishedName={dn}))"
GROUP_BY_NAME_FILTER = "(&(objectClass=group)(cn={name}))"
GROUP_BY_SAM_FILTER = "(&(objectClass=group)(sAMAccountName={sam}))"
COMPUTER_BY_CN_FILTER = "(&(objectClass=computer)(cn={cn}))"
COMPUTER_BY_GUID_FILTER = "(&(objectClass=computer)(objectGUID={guid}))"
USER_IN_GROUP_FILTER = (
    f"(&(memberOf:{attrs.MATCHING_RULE_IN_CHAIN}:={{group_dn}})"
    "(objectCategory=person)(objectClass=user)(sAMAccountName={sam}))"
)

# success, sizeLimitExceeded, noSuchObject
_SEARCH_OK_CODES = (0, 4, 32)


def build_filter(template: str, **values: str) -> str:
    """Substitute RFC 4515 escaped values into a filter template."""
    return template.format(**{k: escape_ldap_filter_value(v) for k, v in values.items()})


def _require(value: Optional[str], message: str) -> str:
    v = (value or "").strip()
    if not v or not is_valid_alphanumeric(v):
        raise ValueError(message)
    return v


def _run_search(
    conn: Connection,
    base: str,
    search_filter: str,
    attributes: Optional[Iterable[str]],
    size_limit: int,
    page_size: int,
) -> list[SearchResult]:
    attr_list = list(attributes) if attributes else [ALL_ATTRIBUTES]
    log.debug("LDAP search base=%r filter=%s attributes=%s", base, search_filter, attr_list)

    if page_size > 0:
        response = conn.extend.standard.paged_search(
            search_base=base,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=attr_list,
            size_limit=size_limit,
            paged_size=page_size,
            generator=False,
        )
    else:
        conn.search(
            search_base=base,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=attr_list,
            size_limit=size_limit,
        )
        response = conn.response

    res = dict(conn.result or {})
    if res.get("result", 0) not in _SEARCH_OK_CODES:
        raise DirectoryAccessError(str(res.get("description") or res.get("message") or res))

    entries = [
        SearchResult.from_entry(e)
        for e in (response or [])
        if e.get("type", "searchResEntry") == "searchResEntry"
    ]
    log.debug("LDAP search returned %d entries", len(entries))
    return entries


class DirectorySearcher:
    """Typed lookups against Active Directory over one ldap3 connection.

    Forms::

        DirectorySearcher("LDAP://DC=oit,DC=example,DC=com")
        DirectorySearcher(path, username, password)
        DirectorySearcher(path, username, password, 3269, AuthenticationTypes.SECURE | ...)

    Every operation has an ``*_async`` twin that runs it on the shared worker
    pool. Access to the connection is serialized, so the searcher can be shared
    between threads. Use as a context manager or call :meth:`close`.
    """

    def __init__(
        self,
        path: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        port: Optional[int] = None,
        auth_types: Optional[AuthenticationTypes] = None,
        *,
        dns_server: str = "",
        tls_validate: bool = False,
    ) -> None:
        if not (path or "").strip():
            raise ValueError("path is required")
        if username is not None or password is not None or port is not None:
            if not username or not password:
                raise ValueError("Service Account Username or Password missing.")
        if port is not None and port == 0:
            raise ValueError("SSL Port number missing.")

        kwargs: dict[str, Any] = {}
        if auth_types is not None:
            kwargs["auth_types"] = AuthenticationTypes(int(auth_types))
        self.cfg = SearcherConfig(
            path=path,
            username=username or "",
            password=password or "",
            port=port if port and port > 0 else 0,
            dns_server=dns_server,
            tls_validate=tls_validate,
            **kwargs,
        )

        self.server = self._make_server(self.cfg)
        self._conn = Connection(self.server, auto_bind=False, **self._bind_options(self.cfg))
        self._lock = threading.Lock()
        self._closed = False
        log.debug("DirectorySearcher created for %s:%s base=%r", self.cfg.host, self.cfg.effective_port, self.cfg.base_dn)

    @classmethod
    def from_settings(cls, settings: Optional[EnvSettings] = None) -> "DirectorySearcher":
        st = settings or get_env()
        configure_workers(st.worker_threads)
        has_creds = bool(st.username or st.password)
        # An explicit port needs credentials; without them the scheme default applies.
        port = (st.port or None) if has_creds else None
        return cls(
            st.ldap_path,
            st.username if has_creds else None,
            st.password if has_creds else None,
            port,
            AuthenticationTypes(st.auth_types),
            dns_server=st.dns_server,
            tls_validate=st.tls_validate,
        )

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"DirectorySearcher(path={self.cfg.path!r}, {state})"

    def __enter__(self) -> "DirectorySearcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ----- connection -----

    @staticmethod
    def _make_server(cfg: SearcherConfig) -> Server:
        tls = Tls(validate=ssl.CERT_REQUIRED if cfg.tls_validate else ssl.CERT_NONE)
        return Server(
            host=cfg.host,
            port=cfg.effective_port,
            use_ssl=cfg.use_ssl,
            get_info=NONE,
            tls=tls,
        )

    @staticmethod
    def _bind_options(cfg: SearcherConfig) -> dict[str, Any]:
        """Translate ADSI authentication bits into ldap3 Connection arguments."""
        flags = cfg.auth_types
        opts: dict[str, Any] = {
            "read_only": bool(flags & AuthenticationTypes.READONLY_SERVER),
            "raise_exceptions": False,
        }
        if flags & AuthenticationTypes.ANONYMOUS:
            opts["authentication"] = ANONYMOUS
        elif flags & AuthenticationTypes.SECURE:
            if cfg.has_credentials:
                # ldap3 NTLM has no signing or sealing; ENCRYPTION (TLS) protects the bind.
                opts.update(authentication=NTLM, user=cfg.ntlm_principal, password=cfg.password)
            else:
                opts.update(authentication=SASL, sasl_mechanism=KERBEROS)
        elif cfg.has_credentials:
            opts.update(authentication=SIMPLE, user=cfg.bind_principal, password=cfg.password)
        else:
            opts["authentication"] = ANONYMOUS
        return opts

    def _ensure_open(self) -> None:
        if self._closed:
            raise SearcherClosedError("DirectorySearcher has been closed")

    def _bind(self, conn: Connection) -> None:
        if conn.bound:
            return
        if not conn.bind():
            res = dict(conn.result or {})
            raise DirectoryAccessError(f"bind failed: {res.get('description', 'unknown error')}")

    def _execute(
        self,
        search_filter: str,
        attributes: Optional[Iterable[str]],
        size_limit: int,
        page_size: int,
    ) -> list[SearchResult]:
        self._ensure_open()
        with self._lock:
            # close() may have run while we waited for the lock.
            self._ensure_open()
            try:
                self._bind(self._conn)
                return _run_search(
                    self._conn, self.cfg.base_dn, search_filter, attributes, size_limit, page_size
                )
            except LDAPException as e:
                log.error("LDAP search failed (filter=%s): %s", search_filter, e)
                raise DirectoryAccessError(str(e)) from e

    def _refetch(
        self, found: SearchResult, search_filter: str, attributes: Iterable[str]
    ) -> Optional[SearchResult]:
        """Repeat a search from the domain root of an entry found earlier.

        Runs on a short-lived LDAP connection to the entry's own domain, which
        can differ from the searcher's root (e.g. a GC path).
        """
        self._ensure_open()
        cfg = self.cfg.rescoped(get_ldap_path(found.path))
        log.debug("Re-querying %s from %s", found.path, cfg.path)

        conn = Connection(self._make_server(cfg), auto_bind=False, **self._bind_options(cfg))
        try:
            self._bind(conn)
            entries = _run_search(conn, cfg.base_dn, search_filter, attributes, 1, 0)
        except LDAPException as e:
            log.error("LDAP re-query failed (%s): %s", cfg.path, e)
            raise DirectoryAccessError(str(e)) from e
        finally:
            try:
                conn.unbind()
            except LDAPException as e:
                log.debug("LDAP unbind after re-query failed: %s", e)
        return entries[0] if entries else None

    def close(self) -> None:
        """Release the connection. Later calls are no-ops."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                if self._conn.bound:
                    self._conn.unbind()
            except LDAPException as e:
                log.warning("LDAP unbind failed: %s", e)
        log.debug("DirectorySearcher closed (%s)", self.cfg.path)

    @property
    def closed(self) -> bool:
        return self._closed

    # ----- generic search -----

    def search(
        self,
        search_filter: str,
        attributes: Optional[Iterable[str]],
        size_limit: int = 0,
        page_size: int = 0,
    ) -> Optional[SearchResult]:
        """First entry matching ``search_filter``, or None.

        Filters that are empty or fail :func:`is_valid_alphanumeric` are not
        sent and yield None.
        """
        self._ensure_open()
        flt = (search_filter or "").strip()
        if not flt or not is_valid_alphanumeric(flt):
            log.warning("Search filter rejected: %r", search_filter)
            return None
        entries = self._execute(flt, attributes, size_limit or 1, page_size)
        return entries[0] if entries else None

    def search_all(
        self,
        search_filter: str,
        attributes: Optional[Iterable[str]] = None,
        size_limit: int = 0,
        page_size: int = 0,
    ) -> Optional[list[SearchResult]]:
        """All entries matching ``search_filter`` (None for a rejected filter)."""
        self._ensure_open()
        flt = (search_filter or "").strip()
        if not flt or not is_valid_alphanumeric(flt):
            log.warning("Search filter rejected: %r", search_filter)
            return None
        return self._execute(flt, attributes, size_limit, page_size)

    # ----- raw entity searches -----

    def user_search_result_by_sam_account_name(
        self, sam_account_name: str, attributes: Iterable[str], size_limit: int = 0, page_size: int = 0
    ) -> Optional[SearchResult]:
        sam = _require(sam_account_name, "Please provide a valid SamAccountName")
        return self.search(build_filter(USER_BY_SAM_FILTER, sam=sam), attributes, size_limit, page_size)

    def group_search_result_by_group_name(
        self, group_name: str, attributes: Iterable[str], size_limit: int = 0, page_size: int = 0
    ) -> Optional[SearchResult]:
        name = _require(group_name, "Please provide a valid group name")
        return self.search(build_filter(GROUP_BY_NAME_FILTER, name=name), attributes, size_limit, page_size)

    def group_search_result_by_sam_account_name(
        self, group_sam_account_name: str, attributes: Iterable[str], size_limit: int = 0, page_size: int = 0
    ) -> Optional[SearchResult]:
        sam = _require(group_sam_account_name, "Please provide a valid group SamAccountName")
        return self.search(build_filter(GROUP_BY_SAM_FILTER, sam=sam), attributes, size_limit, page_size)

    def computer_search_result_by_common_name(
        self, common_name: str, attributes: Iterable[str], size_limit: int = 0, page_size: int = 0
    ) -> Optional[SearchResult]:
        cn = _require(common_name, "Please provide a valid computer name.")
        return self.search(build_filter(COMPUTER_BY_CN_FILTER, cn=cn), attributes, size_limit, page_size)

    def computer_search_result_by_object_guid(
        self, object_guid: str, attributes: Iterable[str], size_limit: int = 0, page_size: int = 0
    ) -> Optional[SearchResult]:
        return self.search(_computer_guid_filter(object_guid), attributes, size_limit, page_size)

    # ----- users -----

    def user_by_sam_account_name(
        self, sam_account_name: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[UserRecord]:
        result = self.user_search_result_by_sam_account_name(
            sam_account_name, UserRecord.ATTRIBUTES, size_limit, page_size
        )
        return UserRecord.from_result(result) if result is not None else None

    def user_by_email(self, email_address: str, size_limit: int = 0, page_size: int = 0) -> Optional[UserRecord]:
        flt = _email_filter(email_address)
        result = self.search(flt, UserRecord.ATTRIBUTES, size_limit, page_size)
        return UserRecord.from_result(result) if result is not None else None

    def user_by_distinguished_name(
        self, distinguished_name: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[UserRecord]:
        dn = _require(distinguished_name, "Please provide a valid DistinguishedName")
        result = self.search(build_filter(USER_BY_DN_FILTER, dn=dn), UserRecord.ATTRIBUTES, size_limit, page_size)
        return UserRecord.from_result(result) if result is not None else None

    def users_by_first_last_name(
        self, first_name: str, last_name: str, size_limit: int = 0, page_size: int = 0
    ) -> list[UserRecord]:
        """Users whose given name and surname start with the given values."""
        if not first_name:
            raise ValueError("first_name is required")
        if not last_name:
            raise ValueError("last_name is required")
        first, last = first_name.strip(), last_name.strip()
        if not (is_valid_alphanumeric(first) and is_valid_alphanumeric(last)):
            return []

        flt = build_filter(USERS_BY_NAME_FILTER, first=first, last=last)
        results = self.search_all(flt, UserRecord.ATTRIBUTES, size_limit, page_size)
        return [UserRecord.from_result(r) for r in results or []]

    def user_manager_by_sam_account_name(
        self, sam_account_name: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[UserWithManagerRecord]:
        result = self.user_search_result_by_sam_account_name(
            sam_account_name, UserWithManagerRecord.ATTRIBUTES, size_limit, page_size
        )
        return self._with_manager(result)

    def user_manager_by_email(
        self, email_address: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[UserWithManagerRecord]:
        flt = _email_filter(email_address)
        result = self.search(flt, UserWithManagerRecord.ATTRIBUTES, size_limit, page_size)
        return self._with_manager(result)

    def _with_manager(self, result: Optional[SearchResult]) -> Optional[UserWithManagerRecord]:
        if result is None:
            return None
        record = UserWithManagerRecord.from_result(result)
        if record.manager_distinguished_name:
            record = record.with_manager(self.user_by_distinguished_name(record.manager_distinguished_name))
        return record

    # ----- groups -----

    def group_by_distinguished_name(
        self, distinguished_name: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[GroupRecord]:
        dn = _require(distinguished_name, "Please provide a valid DistinguishedName")
        result = self.search(build_filter(GROUP_BY_DN_FILTER, dn=dn), GroupRecord.ATTRIBUTES, size_limit, page_size)
        return GroupRecord.from_result(result) if result is not None else None

    def group_by_name(self, group_name: str, size_limit: int = 0, page_size: int = 0) -> Optional[GroupRecord]:
        result = self.group_search_result_by_group_name(group_name, GroupRecord.ATTRIBUTES, size_limit, page_size)
        return GroupRecord.from_result(result) if result is not None else None

    def group_by_sam_account_name(
        self, group_sam_account_name: str, size_limit: int = 0, page_size: int = 0
    ) -> Optional[GroupRecord]:
        result = self.group_search_result_by_sam_account_name(
            group_sam_account_name, GroupRecord.ATTRIBUTES, size_limit, page_size
        )
        return GroupRecord.from_result(result) if result is not None else None

    def group_membership_names_of(
        self, sam_account_name: str, size_limit: int = 0, page_size: int = 0
    ) -> list[str]:
        """Common names of the groups the user is a direct member of."""
        names = []
        for dn in self.group_memberships_of(sam_account_name, size_limit, page_size):
            name = get_common_name(dn)
            if name is not None:
                names.append(name)
        return names

    def group_memberships_of(
        self, sam_account_name: str, size_limit: int = 0, page_size: int = 0
    ) -> list[str]:
        """memberOf DNs of the user, unprocessed."""
        result = self.user_search_result_by_sam_account_name(
            sam_account_name, [attrs.MEMBER_OF], size_limit, page_size
        )
        if result is None:
            return []
        return get_attribute_collection(result, attrs.MEMBER_OF)

    def group_members(self, group_name: str, size_limit: int = 0, page_size: int = 0) -> list[str]:
        """member DNs of the group."""
        result = self.group_search_result_by_group_name(group_name, [attrs.MEMBER], size_limit, page_size)
        if result is None:
            return []
        return get_attribute_collection(result, attrs.MEMBER)

    def group_members_names(self, group_name: str, size_limit: int = 0, page_size: int = 0) -> list[str]:
        """'Last, First' labels of the group members."""
        return [get_name_from_cn(dn) for dn in self.group_members(group_name, size_limit, page_size)]

    def group_ad_user_members(
        self, group_name: str, size_limit: int = 0, page_size: int = 0
    ) -> list[UserRecord]:
        """Members resolved to user records, one lookup per member.

        Members that are not users (nested groups, contacts) are skipped.
        """
        users = []
        for dn in self.group_members(group_name, size_limit, page_size):
            user = self.user_by_distinguished_name(dn)
            if user is not None:
                users.append(user)
        return users

    def is_user_in_group(self, group_sam_account_name: str, user_sam_account_name: str) -> bool:
        """Transitive membership check (LDAP_MATCHING_RULE_IN_CHAIN)."""
        message = "Please provide a valid Group SamAccountName and User SamAccountName"
        group_sam = _require(group_sam_account_name, message)
        user_sam = _require(user_sam_account_name, message)

        group = self.group_search_result_by_sam_account_name(group_sam, [attrs.DISTINGUISHED_NAME])
        if group is None:
            return False
        group_dn = get_attribute(group, attrs.DISTINGUISHED_NAME) or group.path

        flt = build_filter(USER_IN_GROUP_FILTER, group_dn=group_dn, sam=user_sam)
        return bool(self.search_all(flt, [attrs.DISTINGUISHED_NAME]))

    # ----- computers -----

    def computer_by_common_name(self, common_name: str) -> Optional[ComputerRecord]:
        cn = _require(common_name, "Please provide a valid computer name.")
        flt = build_filter(COMPUTER_BY_CN_FILTER, cn=cn)
        found = self.search(flt, [attrs.COMMON_NAME])
        return self._locate_computer(found, flt)

    def computer_by_object_guid(self, object_guid: str) -> Optional[ComputerRecord]:
        flt = _computer_guid_filter(object_guid)
        found = self.search(flt, [attrs.OBJECT_GUID])
        return self._locate_computer(found, flt)

    def _locate_computer(self, found: Optional[SearchResult], search_filter: str) -> Optional[ComputerRecord]:
        if found is None:
            return None
        result = self._refetch(found, search_filter, ComputerRecord.ATTRIBUTES)
        if result is None:
            return None
        return ComputerRecord.from_result(result, self.cfg.dns_server)

    # ----- async twins -----

    search_async = async_twin(search)
    search_all_async = async_twin(search_all)
    user_search_result_by_sam_account_name_async = async_twin(user_search_result_by_sam_account_name)
    group_search_result_by_group_name_async = async_twin(group_search_result_by_group_name)
    group_search_result_by_sam_account_name_async = async_twin(group_search_result_by_sam_account_name)
    computer_search_result_by_common_name_async = async_twin(computer_search_result_by_common_name)
    computer_search_result_by_object_guid_async = async_twin(computer_search_result_by_object_guid)
    user_by_sam_account_name_async = async_twin(user_by_sam_account_name)
    user_by_email_async = async_twin(user_by_email)
    user_by_distinguished_name_async = async_twin(user_by_distinguished_name)
    users_by_first_last_name_async = async_twin(users_by_first_last_name)
    user_manager_by_sam_account_name_async = async_twin(user_manager_by_sam_account_name)
    user_manager_by_email_async = async_twin(user_manager_by_email)
    group_by_distinguished_name_async = async_twin(group_by_distinguished_name)
    group_by_name_async = async_twin(group_by_name)
    group_by_sam_account_name_async = async_twin(group_by_sam_account_name)
    group_membership_names_of_async = async_twin(group_membership_names_of)
    group_memberships_of_async = async_twin(group_memberships_of)
    group_members_async = async_twin(group_members)
    group_members_names_async = async_twin(group_members_names)
    group_ad_user_members_async = async_twin(group_ad_user_members)
    is_user_in_group_async = async_twin(is_user_in_group)
    computer_by_common_name_async = async_twin(computer_by_common_name)
    computer_by_object_guid_async = async_twin(computer_by_object_guid)


def _email_filter(email_address: Optional[str]) -> str:
    email = (email_address or "").strip()
    if not email or not is_valid_alphanumeric(email) or not is_valid_email(email):
        raise ValueError("Please provide a valid email address")
    return build_filter(USER_BY_EMAIL_FILTER, email=email)


def _computer_guid_filter(object_guid: Optional[str]) -> str:
    if not (object_guid or "").strip():
        raise ValueError("object_guid is required")
    # Octet string escapes are already filter-safe.
    return COMPUTER_BY_GUID_FILTER.format(guid=guid_to_octet_string(object_guid))
