import unittest

from frag_split import (
    Budget,
    Fragment,
    Progress,
    Unit,
    format_with_underscore,
    progress,
    render_prompt,
    split_fragments,
    split_lines,
)

SOURCE = (
    "use std::io;\n"
    "\n"
    "fn main() {\n"
    "    let s = \"こんにちは、世界\";\n"
    "    println!(\"{}\", s);\r\n"
    "}\n"
    "// последняя строка без перевода"
)


def texts(fragments):
    return [f.text for f in fragments]


class TestSplitLines(unittest.TestCase):

    def test_keeps_terminators(self):
        self.assertEqual(split_lines("aaa\nbbb\r\nccc"), ["aaa\n", "bbb\r\n", "ccc"])

    def test_trailing_newline(self):
        self.assertEqual(split_lines("a\nb\n"), ["a\n", "b\n"])

    def test_lone_carriage_return_does_not_split(self):
        self.assertEqual(split_lines("a\rb\n"), ["a\rb\n"])

    def test_empty(self):
        self.assertEqual(split_lines(""), [])
        self.assertEqual(split_lines("\n\n"), ["\n", "\n"])


class TestBudget(unittest.TestCase):

    def test_default(self):
        self.assertEqual(Budget.chars(), Budget(Unit.CHARS, 10240))

    def test_limit_must_be_positive(self):
        with self.assertRaises(ValueError):
            Budget.chars(0)
        with self.assertRaises(ValueError):
            Budget.bytes(-1)

    def test_measure(self):
        self.assertEqual(Budget.chars(1).measure("あい\n"), 3)
        self.assertEqual(Budget.bytes(1).measure("あい\n"), 7)


class TestSplitFragments(unittest.TestCase):

    def test_empty_string(self):
        self.assertEqual(split_fragments("", Budget.chars(10)), ())

    def test_line_at_limit(self):
        fragments = split_fragments("aaaaaaaaaa\nb\n", Budget.chars(10))
        self.assertEqual(texts(fragments), ["aaaaaaaaaa\n", "b\n"])
        # 10 символов + "\n" = 11 > 10: это единственная строка-переросток
        self.assertEqual(fragments[0].size_chars, 11)

    def test_exact_fit(self):
        fragments = split_fragments("abc\ndef\nghi\n", Budget.chars(8))
        self.assertEqual(texts(fragments), ["abc\ndef\n", "ghi\n"])
        self.assertEqual(fragments[0].size_chars, 8)

    def test_oversized_line_stands_alone(self):
        text = "short\n" + "x" * 20 + "\n" + "tail"
        fragments = split_fragments(text, Budget.chars(10))
        self.assertEqual(texts(fragments), ["short\n", "x" * 20 + "\n", "tail"])

    def test_oversized_first_line(self):
        fragments = split_fragments("x" * 30 + "\na\nb\n", Budget.chars(5))
        self.assertEqual(texts(fragments), ["x" * 30 + "\n", "a\nb\n"])

    def test_single_line_without_newline(self):
        fragments = split_fragments("abc", Budget.chars(10))
        self.assertEqual(texts(fragments), ["abc"])

    def test_byte_budget(self):
        # "あ\n" - 4 байта UTF-8, но 2 символа
        text = "あ\nい\nう\n"
        self.assertEqual(texts(split_fragments(text, Budget.bytes(8))), ["あ\nい\n", "う\n"])
        self.assertEqual(texts(split_fragments(text, Budget.chars(4))), ["あ\nい\n", "う\n"])
        self.assertEqual(len(split_fragments(text, Budget.bytes(4))), 3)

    def test_sizes_and_ordinals(self):
        fragments = split_fragments("あい\nabc\n", Budget.chars(3))
        self.assertEqual(fragments[0], Fragment(0, "あい\n", 3, 7))
        self.assertEqual(fragments[1], Fragment(1, "abc\n", 4, 4))
        self.assertEqual([f.ordinal for f in fragments], [0, 1])

    def test_custom_measure(self):
        fragments = split_fragments("ab\ncd\nef\n", Budget.chars(6), measure_fn=lambda s: 2 * len(s))
        self.assertEqual(texts(fragments), ["ab\n", "cd\n", "ef\n"])

    def test_non_additive_measure_sees_joined_text(self):
        # Число различных символов: у "ab\nab\n" их 3, хотя у каждой строки тоже 3
        distinct = lambda s: len(set(s))
        fragments = split_fragments("ab\nab\ncd\n", Budget.chars(3), measure_fn=distinct)
        self.assertEqual(texts(fragments), ["ab\nab\n", "cd\n"])

    def test_round_trip(self):
        for budget in (Budget.chars(1), Budget.chars(12), Budget.bytes(25), Budget.chars()):
            fragments = split_fragments(SOURCE, budget)
            self.assertEqual("".join(texts(fragments)), SOURCE, budget)

    def test_boundaries_fall_on_line_ends(self):
        fragments = split_fragments(SOURCE, Budget.chars(20))
        for f in fragments[:-1]:
            self.assertTrue(f.text.endswith("\n"), f)

    def test_fragments_within_budget(self):
        for budget in (Budget.chars(20), Budget.bytes(30)):
            for f in split_fragments(SOURCE, budget):
                lines = split_lines(f.text)
                if len(lines) > 1:
                    self.assertLessEqual(budget.measure(f.text), budget.limit, f)

    def test_deterministic(self):
        budget = Budget.bytes(16)
        self.assertEqual(split_fragments(SOURCE, budget), split_fragments(SOURCE, budget))


class TestProgress(unittest.TestCase):

    def setUp(self):
        self.fragments = (
            Fragment.of(0, "aaa"),
            Fragment.of(1, "bb"),
            Fragment.of(2, "あ"),
        )

    def test_first(self):
        p = progress(self.fragments, 0, Unit.CHARS)
        self.assertEqual(p.size, 3)
        self.assertEqual(p.cumulative, 3)
        self.assertEqual(p.total, 6)
        self.assertAlmostEqual(p.percent, 50.0)
        self.assertAlmostEqual(p.cumulative_percent, 50.0)

    def test_last_in_bytes(self):
        p = progress(self.fragments, 2, Unit.BYTES)
        self.assertEqual((p.size, p.cumulative, p.total), (3, 8, 8))
        self.assertAlmostEqual(p.cumulative_percent, 100.0)

    def test_zero_total(self):
        p = progress((Fragment.of(0, ""),), 0, Unit.CHARS)
        self.assertEqual(p, Progress(0, 0.0, 0, 0, 0.0))


class TestFormatting(unittest.TestCase):

    def test_format_with_underscore(self):
        self.assertEqual(format_with_underscore(1), "1")
        self.assertEqual(format_with_underscore(123), "123")
        self.assertEqual(format_with_underscore(1234), "1_234")
        self.assertEqual(format_with_underscore(12345), "12_345")
        self.assertEqual(format_with_underscore(1234567), "1_234_567")

    def test_render_prompt(self):
        prompt = render_prompt(Progress(1234, 12.3456, 2000, 10000, 20.0), Unit.CHARS)
        self.assertEqual(
            prompt,
            "+1_234 [chars] (12.3%), 2_000/10_000 (20.0%): Y(es)/P(rev)/Q(uit) [y]: ",
        )

    def test_render_prompt_bytes(self):
        prompt = render_prompt(Progress(5, 50.0, 10, 10, 100.0), Unit.BYTES)
        self.assertTrue(prompt.startswith("+5 [bytes] (50.0%), 10/10 (100.0%)"))


if __name__ == '__main__':
    unittest.main()
