from sporefit.errors import MissingReference

import pandas as pd

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

VALID_ACTIONS = ("drop", "use_dilution")

@dataclass(frozen=True)
class ExclusionRule:
    """
    One documented technical failure in the plate data.

    Attributes
    ----------
    name : str
        Short identifier used in warnings and reports.
    match : dict
        Column -> value. A row matches when every listed column equals the
        value (exact match; unlisted columns are not constrained).
    action : str
        'drop' removes matching rows. 'use_dilution' keeps only the
        matching rows plated at `dilution` and removes the other
        dilutions of the same samples.
    dilution : int, optional
        Dilution to keep for 'use_dilution'.
    reason : str
        Free text describing the incident.
    """

    name: str
    match: Dict[str, Any]
    action: str = "drop"
    dilution: Optional[int] = None
    reason: str = field(default="", compare=False)

    def __post_init__(self):

        if self.action not in VALID_ACTIONS:
            err = f"rule '{self.name}': action must be one of {VALID_ACTIONS}, not '{self.action}'"
            raise ValueError(err)

        if len(self.match) == 0:
            err = f"rule '{self.name}': match must name at least one column"
            raise ValueError(err)

        if self.action == "use_dilution" and self.dilution is None:
            err = f"rule '{self.name}': 'use_dilution' requires a dilution"
            raise ValueError(err)

    @classmethod
    def from_dict(cls, entry):
        """Build a rule from one `exclusion_rules` entry of the config."""

        allowed = {"name", "match", "action", "dilution", "reason"}
        unknown = set(entry) - allowed
        if unknown:
            err = f"exclusion rule has unrecognized keys: {sorted(unknown)}"
            raise ValueError(err)

        if "name" not in entry or "match" not in entry:
            raise ValueError("exclusion rule needs both 'name' and 'match'")

        dilution = entry.get("dilution", None)
        if dilution is not None:
            dilution = int(dilution)

        return cls(name=str(entry["name"]),
                   match=dict(entry["match"]),
                   action=entry.get("action", "drop"),
                   dilution=dilution,
                   reason=entry.get("reason", ""))

    def mask(self, df: pd.DataFrame) -> pd.Series:
        """Boolean Series flagging rows that satisfy `match`."""

        missing = set(self.match) - set(df.columns)
        if missing:
            err = f"rule '{self.name}' refers to missing columns: {sorted(missing)}"
            raise ValueError(err)

        hit = pd.Series(True, index=df.index)
        for col, value in self.match.items():
            if pd.api.types.is_numeric_dtype(df[col]):
                value = df[col].dtype.type(value)
            else:
                value = str(value)
            hit &= (df[col] == value)

        return hit

    def apply(self, df: pd.DataFrame):
        """
        Apply the rule.

        Returns
        -------
        out_df : pandas.DataFrame
            new DataFrame with the affected rows removed
        num_removed : int
            number of rows removed. Zero means the rule is stale.

        Raises
        ------
        MissingReference
            'use_dilution' rule whose matching rows include no plate at the
            requested dilution.
        """

        matched = self.mask(df)

        if self.action == "drop":
            to_remove = matched
        else:
            at_dilution = matched & (df["dilution"] == self.dilution)
            if matched.any() and not at_dilution.any():
                err = f"rule '{self.name}': no plates at dilution {self.dilution} "
                err += "to substitute for the matching rows"
                raise MissingReference(err)
            to_remove = matched & ~at_dilution

        out_df = df.loc[~to_remove].copy()

        return out_df, int(to_remove.sum())
