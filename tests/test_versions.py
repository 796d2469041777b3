import pytest

from ctlptl.versions import Version, parse_tolerant


def test_parse_full_version_with_prefix():
    v = parse_tolerant("v1.25.2")
    assert (v.major, v.minor, v.patch) == (1, 25, 2)
    assert v.pre == ()
    assert v.build == ()


def test_parse_short_version_fills_zeros():
    assert parse_tolerant("v1.19") == parse_tolerant("1.19.0")
    assert parse_tolerant("v1.19").patch == 0


def test_parse_build_tag():
    v = parse_tolerant("v1.19.3-34+fa32ff1c160058")
    assert (v.major, v.minor, v.patch) == (1, 19, 3)
    assert v.pre == (34,)
    assert v.build == ("fa32ff1c160058",)


def test_parse_vendor_prerelease():
    v = parse_tolerant("v1.18.10-gke.601")
    assert v.pre == ("gke", 601)


def test_leading_zeroes_and_whitespace_are_tolerated():
    assert parse_tolerant("  v01.02.03\n") == parse_tolerant("1.2.3")


@pytest.mark.parametrize(
    "text",
    ["", "v", "v1.19-rc", "1.2.x", "1.2.3-01", "1.2.3+", "1.2.3-a_b", "1..3", "a.b.c"],
)
def test_invalid_versions(text):
    with pytest.raises(ValueError):
        parse_tolerant(text)


def test_minikube_registry_api_range():
    v1_26 = parse_tolerant("1.26.0")
    v1_27 = parse_tolerant("1.27.0")
    patched = parse_tolerant("v1.26.1")
    assert v1_26 <= patched < v1_27
    assert not (parse_tolerant("v1.25.2") >= v1_26)
    assert parse_tolerant("v1.27.0") >= v1_27


def test_prerelease_sorts_before_release():
    assert parse_tolerant("1.26.0-beta.0") < parse_tolerant("1.26.0")
    assert parse_tolerant("1.0.0-alpha") < parse_tolerant("1.0.0-alpha.1")
    assert parse_tolerant("1.0.0-1") < parse_tolerant("1.0.0-alpha")
    assert parse_tolerant("1.0.0-2") < parse_tolerant("1.0.0-10")


def test_build_metadata_ignored_for_equality_and_hash():
    a = parse_tolerant("1.2.3+one")
    b = parse_tolerant("1.2.3+two")
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_str_round_trip():
    for text in ["1.19.3-34+fa32ff1c160058", "1.18.10-gke.601", "1.25.2"]:
        v = parse_tolerant(text)
        assert str(v) == text
        assert parse_tolerant(str(v)) == v


def test_version_constructor_matches_parse():
    assert Version(1, 25, 2) == parse_tolerant("v1.25.2")
    assert Version(1, 26) < Version(1, 27)