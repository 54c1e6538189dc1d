from pypdf import PdfReader
import io
import re
import logging

logger = logging.getLogger(__name__)


class ResumeParser:
    """Parser for extracting text from uploaded resumes."""

    SUPPORTED_TYPES = {
        "application/pdf": "pdf",
        "text/plain": "txt",
        "text/markdown": "md",
    }

    MAX_SIZE_BYTES = 5 * 1024 * 1024
    MAX_TEXT_CHARS = 20000

    def parse(self, content: bytes, file_type: str) -> str:
        """
        Parse resume content based on file type.

        Args:
            content: Raw file content as bytes
            file_type: MIME type of the file

        Returns:
            Extracted text with blank runs collapsed, capped at MAX_TEXT_CHARS
        """
        if len(content) > self.MAX_SIZE_BYTES:
            raise ValueError("Resume exceeds the 5 MB limit")

        parser_type = self.SUPPORTED_TYPES.get(file_type)

        if parser_type == "pdf":
            text = self._parse_pdf(content)
        elif parser_type in ["txt", "md"]:
            text = self._parse_text(content)
        else:
            raise ValueError(f"Unsupported file type: {file_type}")

        return self.normalize(text)

    def _parse_pdf(self, content: bytes) -> str:
        """Extract text from PDF."""
        try:
            reader = PdfReader(io.BytesIO(content))
            text_parts = []

            for page in reader.pages:
                text = page.extract_text()
                if text:
                    text_parts.append(text)

            return "\n\n".join(text_parts)
        except Exception as e:
            logger.error(f"Error parsing PDF: {e}")
            raise ValueError(f"Failed to parse PDF: {e}")

    def _parse_text(self, content: bytes) -> str:
        """Extract text from plain text file."""
        # Try different encodings
        for encoding in ["utf-8", "cp1252", "latin-1"]:
            try:
                return content.decode(encoding)
            except UnicodeDecodeError:
                continue

        raise ValueError("Could not decode text file")

    @classmethod
    def normalize(cls, text: str) -> str:
        lines = [line.rstrip() for line in text.splitlines()]
        collapsed = re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()
        return collapsed[:cls.MAX_TEXT_CHARS]

    @classmethod
    def is_supported(cls, file_type: str) -> bool:
        """Check if a file type is supported."""
        return file_type in cls.SUPPORTED_TYPES


resume_parser = ResumeParser()
