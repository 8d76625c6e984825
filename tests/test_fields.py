import pytest

from MythAPI.static import RAWTYPE
from MythAPI.exceptions import MythConfigError
from MythAPI.fields import Field, Constant, FieldSet, FieldCatalog, \
                           defaultCatalog
import MythAPI.mythproto
import MythAPI.dataheap


def test_fields_follow_their_version_range(catalog):
    assert [f.name for f in catalog.validFields('Toy', 5)] == \
            ['TITLE', 'TOTAL', 'GONE', 'ACTIVE', 'WHEN', 'MODE', 'FLAGS']
    assert [f.name for f in catalog.validFields('Toy', 10)] == \
            ['TITLE', 'TOTAL', 'LATE', 'ACTIVE', 'WHEN', 'MODE', 'FLAGS']
    assert len(catalog.allFields('Toy')) == 8


def test_positions_shift_with_version(catalog):
    assert catalog.position('Toy', 'GONE', 5) == 2
    assert catalog.position('Toy', 'ACTIVE', 5) == 3
    assert catalog.position('Toy', 'LATE', 5) == -1
    assert catalog.position('Toy', 'LATE', 10) == 2
    assert catalog.position('Toy', 'GONE', 10) == -1


def test_field_by_position(catalog):
    assert catalog.fieldByPosition('Toy', 10, 2).name == 'LATE'
    assert catalog.fieldByPosition('Toy', 10, 7) is None
    assert catalog.fieldByPosition('Toy', 10, -1) is None


def test_field_missing_at_version_is_none(catalog, logbuffer):
    assert catalog.fieldByName('Toy', 5, 'LATE') is None
    assert catalog.fieldByName('Toy', 10, 'LATE').name == 'LATE'
    assert 'not available in version 5' in logbuffer.getvalue()


def test_undeclared_field_is_none(catalog, logbuffer):
    assert catalog.fieldByName('Toy', 10, 'NOPE') is None
    assert 'not declared' in logbuffer.getvalue()
    assert not catalog.isDeclared('Toy', 'NOPE')
    assert catalog.declared('Toy', 'GONE').name == 'GONE'


def test_descriptor_binding(catalog):
    late = catalog.declared('Toy', 'LATE')
    assert late.key == 'Toy'
    assert late.order == 2
    assert late.attrname == 'late'
    assert late.rawtype == RAWTYPE.INTEGER


def test_defaults_and_columns(catalog):
    assert catalog.defaults('Toy', 10) == \
            [None, '0', None, None, None, None, '0']
    assert catalog.columns('toyrow', 1299) == ['id', 'stamp']
    assert catalog.columns('toyrow', 1300) == ['id', 'stamp', 'note']


def test_restricted_catalog_only_sees_given_sets(catalog):
    assert 'Toy' in catalog
    assert 'ProgramInfo' not in catalog
    with pytest.raises(MythConfigError) as exc:
        catalog.count('ProgramInfo', 88)
    assert exc.value.ecode == MythConfigError.CONFIG_UNKNOWN


def test_register_adds_a_set(catalog):
    extra = FieldSet('Extra', [Field('A'), Field('B', versions=(3,))],
                     register=False)
    catalog.register(extra)
    assert catalog.count('Extra', 2) == 1
    assert catalog.count('Extra', 3) == 2


def test_duplicate_field_is_rejected():
    with pytest.raises(MythConfigError) as exc:
        FieldSet('Twice', [Field('A'), Field('A')], register=False)
    assert exc.value.ecode == MythConfigError.CONFIG_DUPLICATE


def test_duplicate_set_key_is_rejected():
    with pytest.raises(MythConfigError) as exc:
        FieldSet('ProgramInfo', [Field('A')])
    assert exc.value.ecode == MythConfigError.CONFIG_DUPLICATE


def test_group_field_needs_a_group():
    with pytest.raises(MythConfigError) as exc:
        Field('MODE', RAWTYPE.ENUMGROUP)
    assert exc.value.ecode == MythConfigError.CONFIG_VALUE


def test_constant_attribute_access(toysets):
    toy, modes, flags, row = toysets
    assert modes.TURBO.name == 'TURBO'
    assert modes.TURBO.value.valueAt(8) == 2
    with pytest.raises(AttributeError):
        modes.BOGUS


def test_supported_constants(catalog):
    assert [c.name for c in catalog.supportedConstants('ToyMode', 5)] == \
            ['OFF', 'ON']
    assert [c.name for c in catalog.supportedConstants('ToyMode', 8)] == \
            ['OFF', 'ON', 'TURBO']


def test_enum_for_value(catalog):
    assert catalog.enumForValue('ToyMode', 8, 2).name == 'TURBO'
    assert catalog.enumForValue('ToyMode', 5, 2) is None
    assert catalog.enumForValue('ToyFlags', 11, 0x4).name == 'GREEN'
    assert catalog.enumForValue('ToyFlags', 12, 0x4) is None


def test_audio_properties_appear_at_35():
    catalog = defaultCatalog()
    assert catalog.position('ProgramInfo', 'AUDIO_PROPERTIES', 30) == -1
    assert catalog.position('ProgramInfo', 'AUDIO_PROPERTIES', 40) >= 0
    assert catalog.fieldByName('ProgramInfo', 30, 'AUDIO_PROPERTIES') is None
    assert catalog.count('ProgramInfo', 40) == \
            catalog.count('ProgramInfo', 30) + 5


def test_program_info_at_newest_version():
    catalog = defaultCatalog()
    names = [f.name for f in catalog.validFields('ProgramInfo', 88)]
    assert len(names) == 52
    assert names[:3] == ['TITLE', 'SUBTITLE', 'DESCRIPTION']
    assert names[-1] == 'BOOKMARKUPDATE'
    assert 'FILESIZE' in names
    assert 'FILESIZE_HIGH' not in names


def test_schedule_columns_follow_schema():
    catalog = defaultCatalog()
    assert 'recdups' in catalog.columns('record', 1000)
    assert 'recdups' not in catalog.columns('record', 1344)
    assert 'season' not in catalog.columns('record', 1100)
    assert 'season' in catalog.columns('record', 1344)
