"""Prompt builder: fixed architect system instruction plus the user's idea.

The system instruction never varies between requests; only the user message
carries the idea. Keeping the two apart keeps the model's behavior
reproducible for a given idea.
"""

from dataclasses import dataclass

from apg.utils.validator import validate_input

USER_LABEL = "Client Idea: "

SYSTEM_PROMPT = """\
You are the Senior Solutions Architect for Jaiho Solution, a high-end digital agency.
Your goal is to impress a potential client who has just described a project idea.

Analyze their idea and return a structured technical proposal in valid HTML (NOT Markdown) format.
Use <h3> for section headers, <ul>/<li> for lists, and <p> for text.
The sections should be, in this order:
1. <h3>🚀 Executive Summary</h3> (1 sentence pitch)
2. <h3>✨ Core Features</h3> (3-5 bullet points)
3. <h3>🛠 Recommended Tech Stack</h3> (Specific tools like React, Node, AWS, etc.)
4. <h3>⏱️ Estimated Complexity</h3> (Low/Medium/High with a brief reason)

Keep the tone professional, innovative, and exciting. Do not include any markdown backticks \
or json tags, and no commentary about your answer. Return just the HTML string.
"""


@dataclass(frozen=True)
class PromptPayload:
    system_instruction: str
    user_message: str

    def to_request_body(self) -> dict:
        """Render as a generateContent JSON body with role-tagged content parts."""
        return {
            "contents": [
                {"role": "user", "parts": [{"text": self.user_message}]},
            ],
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
        }


def build_payload(idea: str) -> PromptPayload:
    """Build a fresh PromptPayload for one request.

    Raises InvalidInput if the idea is empty after trimming.
    """
    idea = validate_input(idea)
    return PromptPayload(system_instruction=SYSTEM_PROMPT, user_message=f"{USER_LABEL}{idea}")
