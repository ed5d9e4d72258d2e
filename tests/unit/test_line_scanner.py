from extraction.line_scanner import LineScanner, contains, find_field, labelled
from extraction.patterns import extract_ipv4
from extraction.platform_extractors import WIFI_ADAPTER_SECTION, network_header, scan_field
from extraction.identity import Outcome


TEXT = """header
SSID : first
Section A:
   Value : a1
   Value : a2
Section B:
   Value : b1
   Other : b2
"""


def test_unscoped_first_match_wins():
    assert find_field(TEXT, labelled('Value')) == 'a1'
    assert find_field(TEXT, labelled('Other')) == 'b2'


def test_no_match_is_none():
    assert find_field(TEXT, labelled('Missing')) is None
    assert find_field('', labelled('Value')) is None
    assert find_field(None, labelled('Value')) is None


def test_section_scope_stops_at_next_section():
    scanner = LineScanner(section_start=contains('Section A'), section_end=contains('Section'))
    assert list(scanner.lines(TEXT)) == ['   Value : a1', '   Value : a2']
    assert scanner.find_field(TEXT, labelled('Other')) is None


def test_inactive_until_start_marker():
    scanner = LineScanner(section_start=contains('Section B'), section_end=contains('Section'))
    assert scanner.find_field(TEXT, labelled('Value')) == 'b1'
    assert scanner.find_field(TEXT, labelled('SSID')) is None


def test_start_line_is_not_offered():
    scanner = LineScanner(section_start=contains('Section A'))
    assert 'Section A:' not in list(scanner.lines(TEXT))


def test_missing_start_marker_yields_nothing():
    scanner = LineScanner(section_start=contains('Section Z'), section_end=contains('Section'))
    assert list(scanner.lines(TEXT)) == []


def test_labelled_is_anchored_and_keeps_colons():
    match = labelled('SSID')
    assert match('    SSID                   : Cafe: 2nd floor') == 'Cafe: 2nd floor'
    assert match('    BSSID                  : aa:bb:cc:dd:ee:ff') is None
    assert match('    SSID                   :   ') is None


def test_labelled_convert_can_reject():
    match = labelled('Default Gateway', convert=extract_ipv4)
    assert match('   Default Gateway . . . . . . . . . : 192.168.1.1') == '192.168.1.1'
    assert match('   Default Gateway . . . . . . . . . : 0.0.0.0') is None


def test_adjacent_adapter_sections_are_not_mixed(fixture_text):
    text = fixture_text('ipconfig_two_sections.txt')
    lines = list(WIFI_ADAPTER_SECTION.lines(text))
    assert any('Subnet Mask' in line for line in lines)
    assert not any('10.20.30' in line for line in lines)
    assert lines[-1].strip() == ''

    value, outcome = scan_field(WIFI_ADAPTER_SECTION, text, contains('IPv4 Address'), extract_ipv4)
    assert value is None
    assert outcome is Outcome.NO_MATCH


def test_scan_field_reports_malformed_candidates(fixture_text):
    text = fixture_text('ipconfig_no_gateway.txt')
    value, outcome = scan_field(WIFI_ADAPTER_SECTION, text, contains('Default Gateway'), extract_ipv4)
    assert value is None
    assert outcome is Outcome.MALFORMED_CANDIDATE


def test_scan_field_ignores_candidates_without_a_value():
    text = 'Wireless LAN adapter Wi-Fi:\n   Default Gateway . . . . . . . . . :   \n'
    value, outcome = scan_field(WIFI_ADAPTER_SECTION, text, contains('Default Gateway'), extract_ipv4)
    assert value is None
    assert outcome is Outcome.NO_MATCH


def test_network_header_names():
    assert network_header('SSID 2 : HomeNet') == 'HomeNet'
    assert network_header('SSID 4 : ') == ''
    assert network_header('    BSSID 1 : aa-bb-cc-dd-ee-ff') is None
    assert network_header('    SSID                   : HomeNet') is None
