from .audits import AUDITS, count_word_hits
from .gate import apply_creator_check, run_creator_check, summarize_creator_check

__all__ = ["AUDITS", "count_word_hits", "run_creator_check", "apply_creator_check", "summarize_creator_check"]
