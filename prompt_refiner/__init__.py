"""prompt-refiner: Refine prompts through a webhook workflow, with an optional caching daemon"""

from prompt_refiner.errors import RefineErrorCode, RefinerError
from prompt_refiner.refinement import PromptRefiner, RefineOptions, create_refiner, refine_prompt
from prompt_refiner.validation import sanitize_error_message, validate_prompt, validate_url

__version__ = "0.2.0"
__all__ = [
    "PromptRefiner",
    "RefineOptions",
    "RefineErrorCode",
    "RefinerError",
    "create_refiner",
    "refine_prompt",
    "sanitize_error_message",
    "validate_prompt",
    "validate_url",
]
