import unittest

from local_embeddings import config
from local_embeddings.text_cleaning import preprocess_text, preprocess_texts


class PreprocessTests(unittest.TestCase):
    def setUp(self):
        self.prev_chars = config.EMBED_CHARS_PER_TOKEN
        config.EMBED_CHARS_PER_TOKEN = 4

    def tearDown(self):
        config.EMBED_CHARS_PER_TOKEN = self.prev_chars

    def test_empty_becomes_space(self):
        self.assertEqual(preprocess_text("", 512), " ")
        self.assertEqual(preprocess_text(None, 512), " ")
        self.assertEqual(preprocess_text(" \n\t ", 512), " ")

    def test_collapses_whitespace(self):
        self.assertEqual(preprocess_text("  hello \n\n  world\t!  ", 512), "hello world !")

    def test_truncates_to_token_budget(self):
        text = "a" * 100
        self.assertEqual(len(preprocess_text(text, 10)), 40)

    def test_short_text_untouched(self):
        self.assertEqual(preprocess_text("short text", 10), "short text")

    def test_preprocess_texts_keeps_order(self):
        self.assertEqual(preprocess_texts(["b  b", "", "a"], 512), ["b b", " ", "a"])


if __name__ == "__main__":
    unittest.main()
