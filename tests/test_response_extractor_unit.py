# User value: This test guarantees users always get a usable page result, whatever the model sends back.
import json
import unittest

from services.response_extractor import (
    NO_ASSISTANT_OUTPUT,
    extract_result,
    flatten_content,
    strip_json_code_fence,
)
from services.transcript import ImageAttachment, Message, TextPart, Transcript


def reply(content) -> Transcript:
    return Transcript.empty().plus(Message("assistant", content))


class ResponseExtractorUnitTests(unittest.TestCase):
    def test_plain_json_reply(self):
        out = extract_result(reply('{"markdown": "X", "isFirstPage": true}'), describe=False)
        self.assertEqual(out, {"markdown": "X", "isFirstPage": True})

    def test_fenced_reply_with_and_without_json_tag(self):
        body = '{"markdown": "X", "isFirstPage": true}'
        for fenced in (f"```json\n{body}\n```", f"```\n{body}\n```", f"```JSON {body}```", f"```json\n{body}\n```\n"):
            out = extract_result(reply(fenced), describe=False)
            self.assertEqual(out["markdown"], "X", fenced)
            self.assertIs(out["isFirstPage"], True, fenced)

    def test_fence_is_stripped_only_when_it_wraps_everything(self):
        text = 'Here you go:\n```json\n{"markdown": "X", "isFirstPage": true}\n```'
        self.assertEqual(strip_json_code_fence(text), text)
        out = extract_result(reply(text), describe=False)
        self.assertEqual(out, {"markdown": text, "isFirstPage": False})

    def test_strip_is_single_pass(self):
        self.assertEqual(strip_json_code_fence("```json\n```inner```\n```"), "```inner```")

    def test_non_json_reply_degrades_to_markdown(self):
        out = extract_result(reply("Hello world"), describe=False)
        self.assertEqual(out, {"markdown": "Hello world", "isFirstPage": False})

    def test_non_json_reply_with_describe_gets_empty_description(self):
        out = extract_result(reply("Hello world"), describe=True)
        self.assertEqual(out, {"markdown": "Hello world", "isFirstPage": False, "description": ""})

    def test_json_array_reply_has_no_fields(self):
        out = extract_result(reply("[1, 2]"), describe=False)
        self.assertEqual(out, {"markdown": "", "isFirstPage": False})
        out = extract_result(reply("[1, 2]"), describe=True)
        self.assertEqual(out, {"markdown": "", "isFirstPage": False, "description": ""})

    def test_json_scalar_or_null_reply_degrades(self):
        for text in ('"just text"', "42", "null", "true"):
            out = extract_result(reply(text), describe=False)
            self.assertEqual(out, {"markdown": text, "isFirstPage": False}, text)

    def test_leading_whitespace_before_fence_is_trimmed(self):
        text = '  \n```json\n{"markdown": "X", "isFirstPage": true}\n```  \n'
        self.assertEqual(strip_json_code_fence(text), '{"markdown": "X", "isFirstPage": true}')
        out = extract_result(reply(text), describe=False)
        self.assertEqual(out, {"markdown": "X", "isFirstPage": True})

    def test_no_assistant_message(self):
        continuation = Transcript.empty().plus(Message("user", "echo"))
        self.assertEqual(
            extract_result(continuation, describe=True),
            {"markdown": NO_ASSISTANT_OUTPUT, "isFirstPage": False},
        )
        self.assertEqual(
            extract_result(Transcript.empty(), describe=False),
            {"markdown": "(No assistant output returned.)", "isFirstPage": False},
        )

    def test_markdown_coercion(self):
        self.assertEqual(extract_result(reply('{"markdown": 42}'), describe=False)["markdown"], "42")
        self.assertEqual(extract_result(reply('{"markdown": null}'), describe=False)["markdown"], "")
        self.assertEqual(extract_result(reply('{"isFirstPage": true}'), describe=False)["markdown"], "")
        self.assertEqual(extract_result(reply('{"markdown": ["a"]}'), describe=False)["markdown"], '["a"]')

    def test_is_first_page_must_be_strict_boolean(self):
        for raw in ('"true"', "1", "null"):
            out = extract_result(reply(f'{{"markdown": "m", "isFirstPage": {raw}}}'), describe=False)
            self.assertIs(out["isFirstPage"], False, raw)

    def test_describe_false_never_returns_description(self):
        out = extract_result(reply('{"markdown": "m", "isFirstPage": false, "description": "d"}'), describe=False)
        self.assertNotIn("description", out)

    def test_describe_true_keeps_string_description_only(self):
        good = extract_result(reply('{"markdown": "m", "description": "A receipt."}'), describe=True)
        bad = extract_result(reply('{"markdown": "m", "description": 7}'), describe=True)
        self.assertEqual(good["description"], "A receipt.")
        self.assertEqual(bad["description"], "")

    def test_tags_array_is_relayed(self):
        out = extract_result(reply('{"markdown": "m", "isFirstPage": false, "tags": ["diagnosis"]}'), describe=False)
        self.assertEqual(out["tags"], ["diagnosis"])

    def test_tags_string_is_dropped(self):
        out = extract_result(reply('{"markdown": "m", "isFirstPage": false, "tags": "diagnosis"}'), describe=False)
        self.assertNotIn("tags", out)

    def test_tags_with_non_string_items_are_dropped(self):
        out = extract_result(reply('{"markdown": "m", "tags": ["diagnosis", 1]}'), describe=False)
        self.assertNotIn("tags", out)

    def test_multi_part_content_is_concatenated(self):
        payload = json.dumps({"markdown": "joined", "isFirstPage": True})
        head, tail = payload[:10], payload[10:]
        msg = Message("assistant", [head, ImageAttachment("https://example.com/x.png"), TextPart(tail)])
        self.assertEqual(flatten_content(msg), payload)
        out = extract_result(Transcript.empty().plus(msg), describe=False)
        self.assertEqual(out, {"markdown": "joined", "isFirstPage": True})

    def test_first_assistant_message_wins(self):
        continuation = reply('{"markdown": "first"}').plus(Message("assistant", '{"markdown": "second"}'))
        self.assertEqual(extract_result(continuation, describe=False)["markdown"], "first")


if __name__ == "__main__":
    unittest.main()
