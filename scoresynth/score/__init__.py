from scoresynth.score.loader import load_score, parse_score, parse_note

__all__ = ["load_score", "parse_score", "parse_note"]
