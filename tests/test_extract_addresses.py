import pytest

from ipstats.errors import ConfigurationError
from ipstats.extract_addresses import AddressExtractor, extract, normalize_address


def test_ipv4_in_order_of_appearance():
    assert extract("1.2.3.4 connect") == ["1.2.3.4"]
    assert extract("10.0.0.1 -> 10.0.0.2") == ["10.0.0.1", "10.0.0.2"]


def test_ipv4_shape_only_no_range_check():
    assert extract("bogus 999.999.999.999 here") == ["999.999.999.999"]


def test_leading_zeros_are_not_unified():
    assert extract("010.001.002.003 10.1.2.3") == ["010.001.002.003", "10.1.2.3"]


def test_ipv4_with_port_and_inside_word():
    assert extract("upstream 10.0.0.1:8080 failed") == ["10.0.0.1"]
    assert extract("abc1.2.3.4") == []


def test_ipv6_forms():
    assert extract("from 2001:db8::1 to fe80::1%eth0") == ["2001:db8::1", "fe80::1%eth0"]
    assert extract("full 2001:0db8:85a3:0000:0000:8a2e:0370:7334") == [
        "2001:0db8:85a3:0000:0000:8a2e:0370:7334"
    ]
    assert extract("loopback ::1 ok") == ["::1"]
    assert extract("upper 2001:DB8::A") == ["2001:DB8::A"]


def test_mixed_families_on_one_line():
    assert extract("from 2001:db8::2 to 10.1.1.1") == ["2001:db8::2", "10.1.1.1"]


def test_ipv4_mapped_prefix_is_stripped():
    assert extract("client ::ffff:192.168.1.1 accepted") == ["192.168.1.1"]
    assert normalize_address("::FFFF:1.2.3.4") == "1.2.3.4"
    assert normalize_address("::ffff:1") == "::ffff:1"


def test_timestamps_and_scopes_are_not_addresses():
    assert extract("12:34:56 sshd[1]: started") == []
    assert extract("std::vector<int> Foo::Bar") == []
    assert extract("aa:bb:cc:dd:ee:ff link up") == []


def test_custom_pattern_takes_whole_match():
    ex = AddressExtractor(r"ip=(\S+)")
    assert ex.extract("ip=foo x ip=bar") == ["ip=foo", "ip=bar"]


def test_invalid_custom_pattern():
    with pytest.raises(ConfigurationError):
        AddressExtractor("(")


def test_fixed_mode_uses_the_line():
    ex = AddressExtractor(fixed=True)
    assert ex.extract("  10.0.0.1 \n") == ["10.0.0.1"]
    assert ex.extract("::ffff:10.0.0.1\n") == ["10.0.0.1"]
    assert ex.extract("   \n") == []


def test_fixed_mode_rejects_pattern():
    with pytest.raises(ConfigurationError):
        AddressExtractor(r"\d+", fixed=True)


def test_custom_pattern_mapped_prefix_only_stripped_before_dotted_quad():
    ex = AddressExtractor(r"::ffff:\S+")
    assert ex.extract("peer ::ffff:abcd up") == ["::ffff:abcd"]
    assert ex.extract("peer ::ffff:10.0.0.1 up") == ["10.0.0.1"]
