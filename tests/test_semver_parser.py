import pytest

from gitflux.semver import (
    Alphanumeric,
    Numeric,
    ParseFailure,
    SemVer,
    SemVerParseError,
    destructure,
    destructure_with_prerelease,
    parse_prerelease,
    parse_semver,
)

VALID_SEMVERS = [
    "1.2.3--.-.-.-.-+------",
    "1.2.3------+------",
    "1.2.3",
    "0.0.0",
    "1.2.3-JIRA-182",
    "1.2.3-jp.JIRA-182",
    "11.22.13",
    "11.22.13-alpha.1",
    "11.22.13-alpha.11",
    "11.22.13-alpha.1.1",
    "11.22.13-alpha.0",
    "11.22.13-alpha.8",
    "11.22.13-jp.JIRA-182",
    "11.22.13-jp.JIRA-182+20220222",
    "11.22.13-jp.JIRA-182+2022-0222",
    "1.2.3+00001",
]

INVALID_SEMVERS = [
    ("1.2", 3),  # no patch version
    ("1.2.", 4),  # ditto, with a trailing dot
    ("11.22.13-alpha.01", 16),  # leading zero in a numeric identifier
    ("11.22.13-jp/JIRA-182+20220222", 11),  # slash in prerelease
    ("11.22.13-jp.JIRA-182+2022.0222", 25),  # dotted build metadata
    (" 1.2.3", 0),  # whitespace is significant
    ("1.2.3 ", 5),
    ("00.00.00", 1),
    ("1.2.3-", 6),
    ("1.2.3+", 6),
    ("1.2.3-/+00001", 6),
    ("", 0),
]


class TestParseSemver:
    """Parsing complete version strings."""

    @pytest.mark.parametrize("text", VALID_SEMVERS)
    def test_valid_versions_render_back_unchanged(self, text):
        result = parse_semver(text)
        assert isinstance(result, SemVer)
        assert str(result) == text

    @pytest.mark.parametrize("text,offset", INVALID_SEMVERS)
    def test_invalid_versions_fail_at_offset(self, text, offset):
        result = parse_semver(text)
        assert isinstance(result, ParseFailure)
        assert result.offset == offset
        assert result.text == text

    def test_components(self):
        result = parse_semver("11.22.13-jp.JIRA-182.7+20220222")
        assert result == SemVer(
            11,
            22,
            13,
            (Alphanumeric("jp"), Alphanumeric("JIRA-182"), Numeric(7)),
            "20220222",
        )
        assert result.prerelease == "jp.JIRA-182.7"

    def test_numeric_identifier_is_not_backtracked(self):
        """A leading numeric match wins even when letters follow it."""
        result = parse_semver("1.0.0-0abc")
        assert isinstance(result, ParseFailure)
        assert result.offset == 7

    def test_failure_message_names_position(self):
        result = parse_semver("1.2")
        assert "offset 3" in result.message
        assert "end of input" in result.message

    def test_parse_raises_on_invalid(self):
        with pytest.raises(SemVerParseError) as info:
            SemVer.parse("1.2.")
        assert info.value.offset == 4
        assert isinstance(info.value, ValueError)

    def test_parse_option(self):
        assert SemVer.parse_option("1.2.3") == SemVer(1, 2, 3)
        assert SemVer.parse_option("1.2") is None

    def test_direct_construction_renders(self):
        version = SemVer(1, 0, 0, [Alphanumeric("rc"), Numeric(1)], "b7")
        assert str(version) == "1.0.0-rc.1+b7"
        assert version.prerelease_identifiers == (Alphanumeric("rc"), Numeric(1))
        assert parse_semver(str(version)) == version


class TestParsePrerelease:
    """The prerelease sublanguage on its own."""

    def test_identifiers(self):
        assert parse_prerelease("alpha.0") == (Alphanumeric("alpha"), Numeric(0))

    def test_single_identifier(self):
        assert parse_prerelease("MY-NAME") == (Alphanumeric("MY-NAME"),)

    @pytest.mark.parametrize("text,offset", [("alpha..0", 6), ("", 0), ("a/b", 1), ("01", 1)])
    def test_invalid(self, text, offset):
        result = parse_prerelease(text)
        assert isinstance(result, ParseFailure)
        assert result.offset == offset


class TestDestructure:
    """Flat-string and identifier-list views of a version string."""

    def test_destructure(self):
        assert destructure("1.2.3-alpha.0+00001") == (1, 2, 3, "alpha.0", "00001")

    def test_destructure_without_prerelease(self):
        assert destructure("1.2.3+00001") == (1, 2, 3, None, "00001")

    @pytest.mark.parametrize("text", ["00.00.00", "1.2.3-/+00001", "X"])
    def test_destructure_invalid(self, text):
        assert destructure(text) is None
        assert destructure_with_prerelease(text) is None

    def test_destructure_with_prerelease(self):
        assert destructure_with_prerelease("1.2.3-alpha.0+00001") == (
            1,
            2,
            3,
            (Alphanumeric("alpha"), Numeric(0)),
            "00001",
        )

    def test_destructure_with_empty_prerelease(self):
        assert destructure_with_prerelease("1.2.3+00001") == (1, 2, 3, (), "00001")


class TestDirectConstruction:
    """Values built by hand must render to strings the parser accepts."""

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Numeric(-1),
            lambda: Numeric(True),
            lambda: Alphanumeric(""),
            lambda: Alphanumeric("a.b"),
            lambda: Alphanumeric("a/b"),
            lambda: Alphanumeric("1a"),
            lambda: SemVer(-1, 0, 0),
            lambda: SemVer(1, "2", 3),
            lambda: SemVer(1, 2, 3, build=""),
            lambda: SemVer(1, 2, 3, build="a.b"),
            lambda: SemVer(1, 2, 3, ("alpha",)),
        ],
    )
    def test_invalid_values_raise(self, factory):
        with pytest.raises(ValueError):
            factory()

    @pytest.mark.parametrize(
        "version",
        [
            SemVer(0, 0, 0),
            SemVer(1, 2, 3, (Alphanumeric("-"), Numeric(0), Alphanumeric("rc-1"))),
            SemVer(1, 2, 3, build="00001"),
        ],
    )
    def test_valid_values_round_trip(self, version):
        assert parse_semver(str(version)) == version
