# User value: This test protects clients from drift in the conversion request and response shapes.
import unittest

from pydantic import ValidationError

from schemas.requests import ImageConversionRequest
from schemas.responses import ConversionResult, ErrorResponse, FileConversionResponse


class ConversionContractUnitTests(unittest.TestCase):
    def test_request_accepts_wire_names(self):
        req = ImageConversionRequest.model_validate(
            {
                "imageUrl": "https://example.com/p2.png",
                "preceding_image_url": "https://example.com/p1.png",
                "preceding_content": "# Page 1",
                "preceding_context": "vendor ACME",
                "graphic_instructions": "describe charts",
                "intent": "archive",
                "model": "vision-large",
                "describe": False,
                "tags": {"invoice": "A bill"},
            }
        )
        conv = req.to_conversion_request({"invoice": "A bill"})
        self.assertEqual(req.image_url, "https://example.com/p2.png")
        self.assertEqual(conv.preceding_image_source, "https://example.com/p1.png")
        self.assertEqual(conv.preceding_markdown, "# Page 1")
        self.assertEqual(conv.preceding_context, "vendor ACME")
        self.assertEqual(conv.model_name, "vision-large")
        self.assertFalse(conv.describe)
        self.assertEqual(conv.tag_definitions, {"invoice": "A bill"})

    def test_request_defaults(self):
        conv = ImageConversionRequest.model_validate({}).to_conversion_request(None)
        self.assertTrue(conv.describe)
        self.assertIsNone(conv.description)
        self.assertIsNone(conv.model_name)
        self.assertIsNone(conv.tag_definitions)

    def test_empty_strings_stay_present(self):
        conv = ImageConversionRequest.model_validate({"description": "", "intent": ""}).to_conversion_request(None)
        self.assertEqual(conv.description, "")
        self.assertEqual(conv.intent, "")

    def test_scalar_text_fields_are_rendered_as_text(self):
        req = ImageConversionRequest.model_validate({"description": 2024, "intent": True, "preceding_context": 1.5})
        conv = req.to_conversion_request(None)
        self.assertEqual(conv.description, "2024")
        self.assertEqual(conv.intent, "true")
        self.assertEqual(conv.preceding_context, "1.5")

    def test_structured_text_field_is_rejected(self):
        with self.assertRaises(ValidationError):
            ImageConversionRequest.model_validate({"description": {"nested": "value"}})

    def test_null_describe_means_no_description(self):
        conv = ImageConversionRequest.model_validate({"describe": None}).to_conversion_request(None)
        self.assertFalse(conv.describe)

    def test_result_requires_markdown_and_first_page(self):
        with self.assertRaises(ValidationError):
            ConversionResult(markdown="x")
        with self.assertRaises(ValidationError):
            ConversionResult(isFirstPage=False)

    def test_result_omits_absent_optional_fields(self):
        result = ConversionResult(markdown="x", isFirstPage=False)
        self.assertEqual(result.model_dump(exclude_none=True), {"markdown": "x", "isFirstPage": False})

    def test_result_rejects_non_string_tags(self):
        with self.assertRaises(ValidationError):
            ConversionResult(markdown="x", isFirstPage=False, tags=[{"name": "diagnosis"}])

    def test_file_and_error_shapes(self):
        self.assertEqual(FileConversionResponse(markdownContent="t").model_dump(), {"markdownContent": "t"})
        self.assertEqual(ErrorResponse(error="No file uploaded.").model_dump(), {"error": "No file uploaded."})


if __name__ == "__main__":
    unittest.main()
