import io
import logging
import pdfplumber

logger = logging.getLogger('apps')


class ReportTextExtractorService:
    def extract_text(self, uploaded_file) -> str:
        """
        Extract plain text from an uploaded report (PDF, CSV or TXT).

        A file that cannot be read yields an empty string so the remaining
        reports can still be analyzed.
        """
        name = getattr(uploaded_file, 'name', '') or ''
        content_type = (getattr(uploaded_file, 'content_type', '') or '').lower()

        try:
            data = uploaded_file.read()
            if 'pdf' in content_type or name.lower().endswith('.pdf'):
                return self.extract_text_from_bytes(io.BytesIO(data))
            return data.decode('utf-8', errors='replace')
        except Exception as e:
            logger.warning(f'Failed to read file {name}: {str(e)}')
            return ''

    def extract_text_from_bytes(self, pdf_bytes: io.BytesIO) -> str:
        text_parts = []
        with pdfplumber.open(pdf_bytes) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
        return '\n'.join(text_parts)
