"""Cover letter body generation through the Groq chat-completion API."""

import os

from dotenv import load_dotenv
from groq import APIError, APIStatusError, Groq

from .assembly import strip_intro_phrases
from .errors import GenerationError, MissingInputError
from .logging_config import get_logger

# Load environment variables
load_dotenv()

logger = get_logger("generator")

SYSTEM_PROMPT = """You are a professional cover letter writer specializing in concise, impactful cover letters.

Instructions:
1. Create a tailored cover letter based on the resume and job description.
2. Keep the letter concise - aiming for 300-400 words total.
3. Structure: 2-3 focused paragraphs highlighting relevant skills/experience matching the job description.
4. Use professional language but avoid excessive corporate jargon. Be clear and direct.
5. Important: Do **NOT** include any preamble like "Here is your cover letter:", "Okay, here's the draft:", etc. Start directly with the first paragraph of the letter body.
6. Focus on specific achievements and quantifiable results where possible.
7. Important: Skip all formalities like dates, addresses, salutations (e.g., "Dear Hiring Manager,"), and closings (e.g., "Sincerely,"). Only provide the core paragraphs of the letter body. Use standard paragraph breaks (\\n\\n).
8. Ensure paragraphs are well-formed and not excessively long.
9. Maintain a confident, professional, and enthusiastic tone.
10. Proofread carefully for grammar and spelling errors."""

USER_PROMPT_TEMPLATE = """Resume Text:
{resume_text}

Job Description:
{job_description}

Please write the core body paragraphs for a tailored cover letter based *only* on the provided resume and job description. Remember to omit salutations, closings, addresses, and any introductory phrases."""


class CoverLetterGenerator:
    """Generate cover letter body paragraphs with a single Groq request.

    Sampling parameters are fixed so repeated runs differ only by model
    randomness. The client never retries: one failed attempt is reported
    to the caller as a GenerationError.
    """

    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    # Sampling configuration
    TEMPERATURE = 0.7
    MAX_TOKENS = 800
    TOP_P = 1

    def __init__(self, api_key: str, model_name: str = None, http_client=None):
        """Initialize the generator.

        Args:
            api_key: Groq API key (bearer credential)
            model_name: Model identifier (default: GROQ_MODEL or DEFAULT_MODEL)
            http_client: Optional httpx.Client handed to the Groq SDK

        Raises:
            MissingInputError: If the API key is empty
        """
        if not api_key or not api_key.strip():
            raise MissingInputError(
                "Missing required information: API key, resume text, or job description."
            )

        self.model_name = model_name or os.getenv("GROQ_MODEL") or self.DEFAULT_MODEL
        self.client = Groq(api_key=api_key.strip(), max_retries=0, http_client=http_client)

    @staticmethod
    def build_messages(resume_text: str, job_description: str) -> list:
        """Build the fixed two-message prompt."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": USER_PROMPT_TEMPLATE.format(
                    resume_text=resume_text, job_description=job_description
                ),
            },
        ]

    def generate_body(self, resume_text: str, job_description: str) -> str:
        """Generate the body paragraphs of a cover letter.

        Args:
            resume_text: Plain resume text
            job_description: Job posting text

        Returns:
            Generated text with any introductory phrase removed

        Raises:
            MissingInputError: If the resume or job description is empty
            GenerationError: On any API, transport or response-format failure
        """
        if not resume_text or not resume_text.strip() or not job_description or not job_description.strip():
            raise MissingInputError(
                "Missing required information: API key, resume text, or job description."
            )

        logger.info("Requesting cover letter body from %s", self.model_name)

        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=self.build_messages(resume_text, job_description),
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
                top_p=self.TOP_P,
                stream=False,
            )
        except APIStatusError as e:
            logger.error("Groq API returned status %s", e.status_code)
            raise GenerationError(
                f"Failed to generate cover letter: {describe_status_error(e)}"
            ) from e
        except APIError as e:
            logger.error("Error calling Groq API: %s", e)
            raise GenerationError(f"Failed to generate cover letter: {e}") from e

        content = extract_content(response)
        if content is None:
            logger.error("Unexpected API response format: %r", response)
            raise GenerationError(
                "Failed to generate cover letter: "
                "Unexpected response format from API. No valid content found."
            )

        return strip_intro_phrases(content)


def describe_status_error(error: APIStatusError) -> str:
    """Build a readable message from a non-success API response.

    Prefers the structured ``error.message`` field of the JSON body and
    falls back to the raw response text.
    """
    body = error.body
    if isinstance(body, dict):
        details = body.get("error", body)
        if isinstance(details, dict) and details.get("message"):
            return f"API Error: {details['message']}"

    raw_text = error.response.text if error.response is not None else ""
    return f"HTTP error! status: {error.status_code} - {raw_text}"


def extract_content(response) -> str:
    """Return the first choice's message content, or None if absent."""
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    return content if isinstance(content, str) else None


def generate_cover_letter_body(api_key: str, resume_text: str, job_description: str) -> str:
    """Validate inputs, then generate a cover letter body in one request.

    Every required field is checked before the client is created, so a
    missing value never reaches the network.
    """
    if not all(value and value.strip() for value in (api_key, resume_text, job_description)):
        raise MissingInputError(
            "Missing required information: API key, resume text, or job description."
        )

    generator = CoverLetterGenerator(api_key=api_key)
    return generator.generate_body(resume_text, job_description)
