import math
import re
import unicodedata
from typing import List, Optional


class ParsingUtils:

    @staticmethod
    def normalize_text(s: object) -> str:
        # record text keeps its characters; only trimmed and whitespace-collapsed
        if s is None:
            return ""
        t = str(s).strip()
        t = t.lstrip("\ufeff").strip()
        t = re.sub(r"\s+", " ", t)
        return t

    @staticmethod
    def tokens(s: object) -> List[str]:
        t = ParsingUtils.normalize_text(s)
        return t.split(" ") if t else []

    @staticmethod
    def coerce_amount(x: object) -> Optional[float]:
        if isinstance(x, (int, float)):
            v = float(x)
            return v if math.isfinite(v) else None

        s = unicodedata.normalize("NFKC", ParsingUtils.normalize_text(x))
        if not s:
            return None

        try:
            v = float(s)
        except ValueError:
            return None

        return v if math.isfinite(v) else None
