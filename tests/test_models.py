#!/usr/bin/env python3
"""
Tests for the records in app/models.py.

Run with:
    python -m pytest tests/test_models.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models import (
    Color, Criterion, RankingEntry, Room, Session, Stand, ThemeSettings,
    hex_to_color, parse_hex_color,
)


class TestHexColors(unittest.TestCase):

    def test_six_digits(self):
        self.assertEqual(parse_hex_color('#E3F2FD'), Color(0xE3, 0xF2, 0xFD, 255))

    def test_without_hash(self):
        self.assertEqual(parse_hex_color('455a64'), Color(0x45, 0x5A, 0x64))

    def test_eight_digits_alpha_last(self):
        self.assertEqual(parse_hex_color('#11223380'), Color(0x11, 0x22, 0x33, 0x80))

    def test_argb_order_is_not_detected(self):
        # An AARRGGBB value decodes as RRGGBBAA.
        self.assertEqual(parse_hex_color('#80112233'), Color(0x80, 0x11, 0x22, 0x33))

    def test_invalid_strings_raise(self):
        for bad in ('', '#12345', '#GGGGGG', '#1234567', 'blue'):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_hex_color(bad)

    def test_non_string_raises(self):
        with self.assertRaises(ValueError):
            parse_hex_color(123456)

    def test_hex_to_color_falls_back_on_malformed(self):
        with self.assertLogs('standapp.models', level='WARNING'):
            color = hex_to_color('not-a-colour', '#000000')
        self.assertEqual(color, Color(0, 0, 0))

    def test_hex_to_color_missing_uses_default(self):
        self.assertEqual(hex_to_color(None, '#BBDEFB'), parse_hex_color('#BBDEFB'))
        self.assertEqual(hex_to_color('', '#BBDEFB'), parse_hex_color('#BBDEFB'))

    def test_hex_property(self):
        self.assertEqual(Color(255, 0, 16).hex, '#FF0010')
        self.assertEqual(Color(255, 0, 16, 0).hex, '#FF001000')

    def test_css_property(self):
        self.assertEqual(Color(1, 2, 3).css, 'rgba(1, 2, 3, 1.0)')


class TestRecords(unittest.TestCase):

    def test_stand_from_json(self):
        s = Stand.from_json({'id': 3, 'name': 'Robotics', 'description': 'Arms',
                             'room_id': '2', 'room_name': 'Hall B'})
        self.assertEqual(s.id, 3)
        self.assertEqual(s.room_id, 2)
        self.assertEqual(s.room_name, 'Hall B')

    def test_stand_without_room(self):
        s = Stand.from_json({'id': 1, 'name': 'Solo', 'room_id': None})
        self.assertIsNone(s.room_id)
        self.assertIsNone(s.description)

    def test_stand_missing_name_raises(self):
        with self.assertRaises(KeyError):
            Stand.from_json({'id': 1})

    def test_criterion_from_json(self):
        c = Criterion.from_json({'id': '7', 'name': 'Creativity', 'max_score': '10'})
        self.assertEqual(c, Criterion(7, 'Creativity', 10))
        self.assertIsNone(c.description)

    def test_rooms_compare_by_id(self):
        self.assertEqual(Room(1, 'Hall A'), Room(1, 'Renamed'))
        self.assertNotEqual(Room(1, 'Hall A'), Room(2, 'Hall A'))

    def test_ranking_entry(self):
        e = RankingEntry.from_json({'rank': 2, 'stand_name': 'Chem', 'room_name': 'Lab',
                                    'total_achieved_score': 41.5, 'evaluator_count': 3})
        self.assertEqual(e.rank, 2)
        self.assertEqual(e.total_score, 41.5)
        self.assertEqual(e.evaluator_count, 3)

    def test_ranking_entry_uses_position_without_rank(self):
        e = RankingEntry.from_json({'stand_name': 'Bio'}, position=5)
        self.assertEqual(e.rank, 5)
        self.assertEqual(e.total_score, 0)
        self.assertEqual(e.evaluator_count, 0)

    def test_session_round_trip(self):
        s = Session('http://h', 'alice', 'session=1', 'Administrator')
        self.assertEqual(Session.from_json(s.to_json()), s)


class TestThemeSettings(unittest.TestCase):

    def test_defaults(self):
        t = ThemeSettings.from_json({})
        self.assertEqual(t.gradient_color1.hex, '#E3F2FD')
        self.assertEqual(t.gradient_color2.hex, '#BBDEFB')
        self.assertEqual(t.dark_gradient_color1.hex, '#000000')
        self.assertEqual(t.dark_gradient_color2.hex, '#455A64')
        self.assertEqual(t.title, 'Stand App')

    def test_server_values(self):
        t = ThemeSettings.from_json({'bg_gradient_color1': '#FF0000',
                                     'dark_bg_gradient_color2': '#00FF00',
                                     'index_title_text': 'Science Fair'})
        self.assertEqual(t.gradient_color1, Color(255, 0, 0))
        self.assertEqual(t.dark_gradient_color2, Color(0, 255, 0))
        self.assertEqual(t.title, 'Science Fair')

    def test_malformed_colour_falls_back_per_field(self):
        with self.assertLogs('standapp.models', level='WARNING'):
            t = ThemeSettings.from_json({'bg_gradient_color2': '#XYZ'})
        self.assertEqual(t.gradient_color2.hex, '#BBDEFB')

    def test_gradient_by_brightness(self):
        t = ThemeSettings()
        self.assertEqual(t.gradient(), [t.gradient_color1, t.gradient_color2])
        self.assertEqual(t.gradient(dark_mode=True),
                         [t.dark_gradient_color1, t.dark_gradient_color2])

    def test_logo_url(self):
        t = ThemeSettings.from_json({'logo_path': '/static/logo.png'})
        self.assertEqual(t.logo_url('http://h:5000/'), 'http://h:5000/static/logo.png')
        self.assertIsNone(ThemeSettings().logo_url('http://h'))
        absolute = ThemeSettings(logo_path='https://cdn/logo.png')
        self.assertEqual(absolute.logo_url('http://h'), 'https://cdn/logo.png')


if __name__ == '__main__':
    unittest.main()
