"""gitflux semver — semantic version model, parser, and precedence ordering.

Usage:
    from gitflux.semver import ParseFailure, SemVer, parse_semver, precedence_key

    result = parse_semver("1.2.3-alpha.0")
    if isinstance(result, ParseFailure):
        print(result.offset)
    versions = sorted(candidates, key=precedence_key)
"""

from gitflux.semver.model import (
    Alphanumeric,
    Identifier,
    Numeric,
    SemVer,
    compare_identifiers,
    compare_prerelease,
    compare_semver,
    precedence_key,
)
from gitflux.semver.parser import (
    ParseFailure,
    ParseResult,
    SemVerParseError,
    destructure,
    destructure_with_prerelease,
    parse_prerelease,
    parse_semver,
)

__all__ = [
    "Alphanumeric",
    "Identifier",
    "Numeric",
    "ParseFailure",
    "ParseResult",
    "SemVer",
    "SemVerParseError",
    "compare_identifiers",
    "compare_prerelease",
    "compare_semver",
    "destructure",
    "destructure_with_prerelease",
    "parse_prerelease",
    "parse_semver",
    "precedence_key",
]
