"""Unit tests for column value conversion.
"""
import datetime
from decimal import Decimal

import pytest
from sqldao.convert import TemporalConverter, ValueConverter, read_lob
from sqldao.convert import to_bytes, to_decimal, to_int, to_string
from sqldao.exceptions import TypeConversionError


class TestNumbers:

    @pytest.mark.parametrize(('value', 'expected'), [
        (12.3, Decimal('12.3')),
        (0.1, Decimal('0.1')),
        (7, Decimal(7)),
        (' 5.50 ', Decimal('5.50')),
        (True, Decimal(1)),
    ])
    def test_to_decimal_uses_string_form(self, value, expected):
        assert to_decimal(value) == expected

    def test_to_decimal_keeps_decimal(self):
        value = Decimal('1.005')
        assert to_decimal(value) is value

    @pytest.mark.parametrize(('value', 'expected'), [
        ('42', 42),
        ('42.9', 42),
        (42.9, 42),
        (Decimal('-3.7'), -3),
    ])
    def test_to_int_truncates(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize('fn', [to_int, to_decimal])
    def test_bad_number(self, fn):
        with pytest.raises(TypeConversionError):
            fn('forty-two')

    def test_nan_to_int(self):
        with pytest.raises(TypeConversionError):
            to_int(float('nan'))


class TestTemporal:

    def test_iso_text(self):
        temporal = TemporalConverter()
        assert temporal.to_date('2024-03-15') == datetime.date(2024, 3, 15)
        assert temporal.to_datetime('2024-03-15T08:30:00') == datetime.datetime(2024, 3, 15, 8, 30)
        assert temporal.to_time('08:30:15') == datetime.time(8, 30, 15)

    def test_configured_formats(self):
        temporal = TemporalConverter(date_format='%d/%m/%Y',
                                     datetime_format='%d/%m/%Y %H:%M',
                                     time_format='%H.%M')
        assert temporal.to_date('15/03/2024') == datetime.date(2024, 3, 15)
        assert temporal.to_datetime('15/03/2024 08:30') == datetime.datetime(2024, 3, 15, 8, 30)
        assert temporal.to_time('08.30') == datetime.time(8, 30)

    def test_format_mismatch(self):
        temporal = TemporalConverter(date_format='%d/%m/%Y')
        with pytest.raises(TypeConversionError):
            temporal.to_date('2024-03-15')

    def test_between_temporal_types(self):
        temporal = TemporalConverter()
        moment = datetime.datetime(2024, 3, 15, 8, 30)
        assert temporal.to_date(moment) == datetime.date(2024, 3, 15)
        assert temporal.to_time(moment) == datetime.time(8, 30)
        assert temporal.to_datetime(datetime.date(2024, 3, 15)) == datetime.datetime(2024, 3, 15)

    def test_duration_to_time(self):
        assert TemporalConverter().to_time(datetime.timedelta(hours=13, minutes=5)) == datetime.time(13, 5)

    def test_unsupported_source(self):
        with pytest.raises(TypeConversionError):
            TemporalConverter().to_date(20240315)


class TestLobs:

    def test_read_lob(self, make_lob):
        assert read_lob(make_lob(b'\x00\x01')) == b'\x00\x01'
        assert read_lob(make_lob('clob text')) == 'clob text'
        assert read_lob(memoryview(b'ab')) == b'ab'
        assert read_lob(bytearray(b'ab')) == b'ab'

    def test_to_string(self, make_lob):
        assert to_string(make_lob('clob text')) == 'clob text'
        assert to_string(b'bytes text') == 'bytes text'
        assert to_string(12) == '12'

    def test_to_bytes(self, make_lob):
        assert to_bytes(make_lob('abc')) == b'abc'
        assert to_bytes(memoryview(b'abc')) == b'abc'
        with pytest.raises(TypeConversionError):
            to_bytes(12)


class TestValueConverter:

    def test_same_type_returned_as_is(self):
        value = Decimal('1.5')
        assert ValueConverter().convert(value, Decimal) is value

    def test_table(self, make_lob):
        converter = ValueConverter()
        assert converter.convert(12.3, Decimal) == Decimal('12.3')
        assert converter.convert('7', int) == 7
        assert converter.convert(7, float) == 7.0
        assert converter.convert(7, str) == '7'
        assert converter.convert('2024-03-15', datetime.date) == datetime.date(2024, 3, 15)
        assert converter.convert(make_lob('notes'), str) == 'notes'
        assert converter.convert(bytearray(b'ab'), bytes) == b'ab'

    def test_lob_onto_other_type_is_read(self, make_lob):
        assert ValueConverter().convert(make_lob(b'raw'), object) == b'raw'

    def test_unknown_target_passes_through(self):
        converter = ValueConverter()
        assert converter.convert(1, bool) == 1
        items = ['a']
        assert converter.convert(items, tuple) is items

    def test_none(self):
        assert ValueConverter().convert(None, int) is None

    def test_from_options(self):
        class Options:
            date_format = '%d.%m.%Y'
            datetime_format = None
            time_format = None

        converter = ValueConverter.from_options(Options())
        assert converter.temporal.date_format == '%d.%m.%Y'
        assert converter.convert('15.03.2024', datetime.date) == datetime.date(2024, 3, 15)
        assert ValueConverter.from_options(None).temporal.date_format is None


if __name__ == '__main__':
    __import__('pytest').main([__file__])
