"""Input guards applied to identifiers before they reach an LDAP filter.

The predicates are deliberately loose: they report whether *any* character
of the allowed class occurs in the value (``re.search``), not whether the
whole value is made of allowed characters.
"""

from __future__ import annotations

import re

# Extended Latin letters accepted alongside ASCII.
_EXTENDED_LATIN = (
    "áÁàÀȧȦâäǎăāãåąⱥấầắằǡǻǟẫẵảȁȃẩẳạḁậặÂÄǍĂĀÃÅĄȺẤẦẮẰǠǺǞẪẴẢȀȂẨẲ"
    "ẠḀẬẶæÆǽǼǣǢḃƀɓḅḇƃḂɃƁḄḆƂćċĉčçȼḉƈĆĊĈČÇȻḈƇḋďḑđƌɗḍḓḏðǳǆḊĎḐĐƋƊ"
    "ḌḒḎÐǱǲǄǅéèėêëěĕēẽęȩɇếềḗḕễḝẻȅȇểẹḙḛệÉÈĖÊËĚĔĒẼĘȨɆẾỀḖḔỄḜẺȄȆỂ"
    "ẸḘḚỆḟƒƑḞǵġĝǧğḡģǥɠǴĠĜǦĞḠĢǤƓḣĥḧȟḩħḥḫⱨḢĤḦȞḨĦḤḪⱧíìıîïǐĭīĩįɨḯ"
    "ỉȉȋịḭĳÍÌİÎÏǏĬĪĨĮƗḮỈȈȊỊḬĲĵǰɉĴɈḱǩķƙḳḵⱪḰǨĶƘḲḴⱩĺŀľⱡļƚłḷḽḻḹǉĹ"
    "ĿĽⱠĻȽŁḶḼḺḸǇǈḿṁṃḾṀṂńǹṅňñņɲƞṇṋṉǌŋŃǸṄŇÑŅƝȠṆṊṈǊǋŊóòȯôöǒŏōõǫő"
    "ốồøṓṑȱṍȫỗṏǿȭǭỏȍȏơổọớờỡộƣởợœÓÒȮÔÖǑŎŌÕǪŐỐỒØṒṐȰṌȪỖṎǾȬǬỎȌȎƠỔ"
    "ỌỚỜỠỘƢỞỢŒṕṗᵽƥṔṖⱣƤɋɊŕṙřŗɍɽȑȓṛṟṝŔṘŘŖɌⱤȐȒṚṞṜśṡŝšşṥṧṣșṩßŚṠŜŠ"
    "ŞṤṦṢȘṨẞṫẗťţƭṭʈțṱṯⱦþŧṪŤŢƬṬƮȚṰṮȾÞŦúùûüǔŭūũůųűʉǘǜǚṹǖṻủȕȗưụṳ"
    "ứừṷṵữửựÚÙÛÜǓŬŪŨŮŲŰɄǗǛǙṸǕṺỦȔȖƯỤṲỨỪṶṴỮỬỰṽṿʋṼṾƲẃẁẇŵẅẘẉⱳẂẀẆŴ"
    "ẄẈⱲẋẍẊẌýỳẏŷÿȳỹẙɏỷƴỵÝỲẎŶŸȲỸɎỶƳỴźżẑžƶȥẓẕⱬŹŻẐŽƵȤẒẔⱫ"
)

_ALPHA = f"a-zA-Z{_EXTENDED_LATIN}"
_ALPHANUMERIC = f"a-zA-Z0-9{_EXTENDED_LATIN}"

_ALPHA_RE = re.compile(f"[{_ALPHA}]")
_ALPHANUMERIC_RE = re.compile(f"[{_ALPHANUMERIC}]")
_NAME_RE = re.compile(f"[{_ALPHANUMERIC} ,.'\\-]")
_EMAIL_RE = re.compile(
    f"[{_ALPHANUMERIC}'_.\\-]+@[{_ALPHANUMERIC}'_.\\-]+\\.[{_ALPHANUMERIC}]{{2,4}}"
)


def _matches(pattern: re.Pattern[str], value: str | None) -> bool:
    if not value:
        return False
    return pattern.search(value) is not None


def is_valid_alpha(value: str | None) -> bool:
    return _matches(_ALPHA_RE, value)


def is_valid_alphanumeric(value: str | None) -> bool:
    return _matches(_ALPHANUMERIC_RE, value)


def is_valid_name(value: str | None) -> bool:
    """Letters, digits, space, comma, period, apostrophe or hyphen."""
    return _matches(_NAME_RE, value)


def is_valid_email(value: str | None) -> bool:
    """``local@domain.tld`` shape somewhere in the value."""
    return _matches(_EMAIL_RE, value)
