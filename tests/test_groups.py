import pytest

from MythAPI.static import LATEST
from MythAPI.groups import FlagGroup, EnumGroup
from MythAPI.dataheap import Schedule
import MythAPI.mythproto


def test_inuse_recording_moved_at_57():
    assert FlagGroup('ProgramFlags', 50, 0x20).isSet('FL_INUSERECORDING')
    assert not FlagGroup('ProgramFlags', 60, 0x20)\
                    .isSet('FL_INUSERECORDING')
    assert FlagGroup('ProgramFlags', 60, 0x100000)\
                    .isSet('FL_INUSERECORDING')
    # the old bit was reused
    assert FlagGroup('ProgramFlags', 60, 0x20).isSet('FL_REALLYEDITING')


def test_flags_unknown_at_version_are_never_set():
    flags = FlagGroup('ProgramFlags', 20, 0xffffffff)
    assert not flags.isSet('FL_INUSERECORDING')
    assert not flags.set('FL_WATCHED')
    assert flags.isSet('FL_COMMFLAG')


def test_flag_names_and_str():
    flags = FlagGroup('ProgramFlags', 60, 0x100001)
    assert [f.name for f in flags.activeFlags()] == \
            ['FL_COMMFLAG', 'FL_INUSERECORDING']
    assert str(flags) == '1048577=> {FL_COMMFLAG,FL_INUSERECORDING}'
    assert 'FL_WATCHED' in [f.name for f in flags.inactiveFlags()]
    assert flags.flagMap()['FL_INUSERECORDING'] is True


def test_set_and_clear_report_changes():
    changes = []
    flags = FlagGroup('ProgramFlags', 88, 0, callback=changes.append)
    assert flags.set('FL_WATCHED')
    assert not flags.set('FL_WATCHED')
    assert changes == [0x200]
    assert flags.clear('FL_WATCHED')
    assert not flags.clear('FL_WATCHED')
    assert changes == [0x200, 0]


def test_item_and_attribute_access():
    flags = FlagGroup('ProgramFlags', 88, 0)
    flags['FL_REPEAT'] = True
    assert flags['FL_REPEAT']
    assert flags.FL_REPEAT
    assert int(flags) == 0x1000
    with pytest.raises(KeyError):
        flags['FL_BOGUS']
    with pytest.raises(AttributeError):
        flags.FL_BOGUS


def test_flag_value_of():
    flags = FlagGroup.valueOf('ProgramFlags', 88, 'FL_COMMFLAG',
                              'FL_CUTLIST')
    assert flags.longValue == 0x3
    assert flags == FlagGroup('ProgramFlags', 88, 3)


def test_id_only_dup_check_was_short_lived():
    assert FlagGroup('DupMethodType', 9, 0x08).isSet('DUP_CHECK_ID_ONLY')
    assert not FlagGroup('DupMethodType', 10, 0x08)\
                    .isSet('DUP_CHECK_ID_ONLY')
    assert FlagGroup('DupMethodType', 40, 0x08)\
                    .isSet('DUP_CHECK_SUB_THEN_DESC')


def test_enum_value_resolves_by_version():
    assert EnumGroup('RecordingStatus', 88, -2).name == 'RECORDING'
    assert EnumGroup('RecordingStatus', 10, 6).name == 'CANCELLED'
    assert EnumGroup('RecordingStatus', 20, 6).name == 'NOT_LISTED'
    assert EnumGroup('RecordingStatus', 20, -6).name == 'CANCELLED'


def test_unknown_enum_is_kept():
    status = EnumGroup('RecordingStatus', 88, 99)
    assert status.isUnknown()
    assert status.getEnum() is None
    assert status.name is None
    assert int(status) == 99
    assert str(status) == 'UNKNOWN(99)'
    assert not status.hasEnum('RECORDING')


def test_set_enum_only_accepts_supported_constants():
    changes = []
    rectype = EnumGroup('RecordingType', 80, 2, callback=changes.append)
    assert rectype.name == 'DAILY_RECORD'
    assert not rectype.setEnum('TIMESLOT_RECORD')
    assert rectype.value == 2
    assert rectype.setEnum('ALL_RECORD')
    assert changes == [4]
    assert EnumGroup('RecordingType', 70, 2).name == 'TIMESLOT_RECORD'


def test_enum_validity_by_schema_version():
    assert EnumGroup('RecordingType', value=2, schemaVersion=1300).name == \
            'TIMESLOT_RECORD'
    assert EnumGroup('RecordingType', value=2, schemaVersion=1344).name == \
            'DAILY_RECORD'


def test_has_enum_and_value_of():
    status = EnumGroup.valueOf('RecordingStatus', 88, 'RECORDED')
    assert status.value == -3
    assert status.hasEnum('RECORDING', 'RECORDED')
    assert status.isSet('RECORDED')
    assert not status.hasEnum('RECORDING')
    assert str(status) == 'RECORDED'


def test_protocol_ranges_apply_to_database_values():
    flags = FlagGroup('DupMethodType', LATEST, 0x08, schemaVersion=1344)
    assert [f.name for f in flags.activeFlags()] == \
            ['DUP_CHECK_SUB_THEN_DESC']
    assert flags.activeFlags() == \
            FlagGroup('DupMethodType', 88, 0x08).activeFlags()
    assert not flags.isSet('DUP_CHECK_ID_ONLY')
    assert not flags.set('DUP_ALLOW_EMPTY')
    rule = Schedule()
    rule.setRaw('DUP_METHOD', '8')
    assert [f.name for f in rule.dup_method.activeFlags()] == \
            ['DUP_CHECK_SUB_THEN_DESC']


def test_schema_ranges_still_win_for_database_values():
    # TIMESLOT_RECORD ended at protocol 77, but rows are read at LATEST
    rectype = EnumGroup('RecordingType', LATEST, 2, schemaVersion=1300)
    assert rectype.name == 'TIMESLOT_RECORD'
    assert 'WEEKSLOT_RECORD' in [c.name for c in rectype.supported()]
    assert 'TEMPLATE_RECORD' not in [c.name for c in rectype.supported()]


def _bits(const, version):
    return const.value.valueAt(version)


def _single(bits):
    return bits > 0 and not (bits & (bits-1))


FLAG_CASES = [(key, version, None)
                    for key in ('ProgramFlags', 'DupInType', 'DupMethodType',
                                'AudioProperties', 'VideoProperties',
                                'SubtitleType', 'JobType', 'JobCommands',
                                'RecordingFilters')
                    for version in (5, 20, 30, 34, 53, 57, 76, 77, 88)] + \
             [(key, LATEST, schema)
                    for key in ('DupInType', 'DupMethodType',
                                'RecordingFilters')
                    for schema in (1277, 1309, 1310, 1344)]


@pytest.mark.parametrize('key,version,schemaVersion', FLAG_CASES)
def test_distinct_flags_are_independent(key, version, schemaVersion):
    consts = FlagGroup(key, version, schemaVersion=schemaVersion).supported()
    for a in consts:
        for b in consts:
            if a.name == b.name:
                continue
            ba, bb = _bits(a, version), _bits(b, version)
            if ba & bb:
                # only composite masks may share bits with another flag
                assert not (_single(ba) and _single(bb)), (a, b)
                continue
            if not (_single(ba) and _single(bb)):
                continue

            flags = FlagGroup(key, version, 0, schemaVersion=schemaVersion)
            assert flags.set(a)
            assert flags.isSet(a)
            assert not flags.isSet(b)

            flags = FlagGroup(key, version, bb, schemaVersion=schemaVersion)
            flags.set(a)
            assert flags.isSet(b)
            flags.clear(a)
            assert flags.isSet(b)
            assert not flags.isSet(a)


ENUM_CASES = [(key, version, None)
                    for key in ('RecordingStatus', 'RecordingType',
                                'RecordingSearchType', 'CategoryType',
                                'JobStatus')
                    for version in (1, 5, 12, 17, 18, 19, 40, 76, 77, 88)] + \
             [('RecordingType', LATEST, schema)
                    for schema in (1061, 1300, 1302, 1309, 1310, 1344)]


@pytest.mark.parametrize('key,version,schemaVersion', ENUM_CASES)
def test_enum_constants_are_exclusive(key, version, schemaVersion):
    consts = EnumGroup(key, version, schemaVersion=schemaVersion).supported()
    assert consts
    for x in consts:
        group = EnumGroup(key, version, 0, schemaVersion=schemaVersion)
        group.setEnum(x)
        assert group.getEnum().name == x.name
        assert group.hasEnum(x)
        for y in consts:
            if y.name != x.name:
                assert not group.hasEnum(y), (x, y)
