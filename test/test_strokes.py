import unittest

from nestgrid.strokes import (
    Stroke, StrokeStyle, StrokeStyles, Position, CellType, MinMaxDepth
)


class TestStrokes(unittest.TestCase):

    def test_stroke(self):
        s = Stroke(StrokeStyle.outer, 'HT1', 0)
        self.assertEqual(s.to_string(), 'outer:HT1:0')
        self.assertEqual(s, Stroke(StrokeStyle.outer, 'HT1', 0))
        self.assertNotEqual(s, Stroke(StrokeStyle.inner, 'HT1', 0))
        self.assertEqual(
            Stroke.list_to_string([s, Stroke(StrokeStyle.none, 'HT4', 1)]),
            '[outer:HT1:0,none:HT4:1]'
        )

    def test_codes(self):
        self.assertEqual([ s.code for s in StrokeStyle ], ['o', 'i', '_'])
        self.assertEqual([ t.code for t in CellType ], ['c', '_', 'rs', 'cs'])

    def test_stroke_styles_encoding(self):
        styles = StrokeStyles()
        self.assertEqual(styles.encoding, '____')
        styles.set_stroke_style(Position.top, StrokeStyle.outer)
        styles.set_stroke_style(Position.left, StrokeStyle.inner)
        self.assertEqual(styles.encoding, 'o__i')
        self.assertEqual(styles.get_stroke_style(Position.right), StrokeStyle.none)

        styles = StrokeStyles(right=StrokeStyle.outer, bottom=StrokeStyle.inner)
        self.assertEqual(styles.encoding, '_oi_')


class TestMinMaxDepth(unittest.TestCase):

    def test_delta(self):
        for min_depth, max_depth, delta in (
                (0, 0, 0),
                (0, 1, 1),
                (1, 3, 2),
                (2, 2, 0),
        ):
            with self.subTest(min_depth=min_depth, max_depth=max_depth):
                self.assertEqual(MinMaxDepth(min_depth, max_depth).delta, delta)

    def test_empty(self):
        mm = MinMaxDepth.from_depths([])
        self.assertTrue(mm.is_empty())
        self.assertEqual(mm.delta, 0)

    def test_combine(self):
        mm = MinMaxDepth.combine([
            MinMaxDepth.from_depths([1, 2]),
            MinMaxDepth(),
            MinMaxDepth.from_depths([0]),
        ])
        self.assertEqual(mm, MinMaxDepth(0, 2))
        self.assertEqual(MinMaxDepth.combine([MinMaxDepth(), MinMaxDepth()]),
                         MinMaxDepth())


if __name__ == '__main__':
    unittest.main()
