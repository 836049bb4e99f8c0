"""Prompt templates for momentum enrichment.

The collaborator is asked for a JSON object only; the verdict headers it may
choose from are the same fixed strings used for local verdicts.
"""

import json
from typing import Any, Dict

from trajectory.models.momentum import VERDICT_HEADERS, Verdict

SYSTEM_PROMPT = (
    "You are a behavioral trajectory analyst. You judge today's habits against "
    "yesterday's momentum without flattery. You always answer with a single JSON "
    "object and nothing else."
)

OUTPUT_FORMAT = """{
  "verdict_header": "string",
  "daily_momentum": number,
  "slope_gradient": "climbing|flat|declining",
  "risk_assessment": "low|moderate|high",
  "projection_30_days": "string describing units of deviation",
  "ai_summary": "string"
}"""


def build_prompt(context: Dict[str, Any]) -> str:
    """Render the user prompt from the provenance-stripped context."""
    yesterday = context["yesterday_final_score"]
    slope = context["historical_average_slope"]
    return f"""
### INPUT CONTEXT
{json.dumps(context, indent=2)}

### TASK
1. Calculate the 'Net Momentum Score' for today: the sum of the signed weights of every habit whose status is "completed".
2. Generate the 'Better/Worse' verdict by comparing today's score to {yesterday}.
   - If Today > Yesterday: "{VERDICT_HEADERS[Verdict.BETTER]}"
   - If Today < Yesterday: "{VERDICT_HEADERS[Verdict.WORSE]}"
   - If Today == Yesterday: "{VERDICT_HEADERS[Verdict.STAGNANT]}"
3. Determine the 'Risk Level' (low/moderate/high) based on the current gradient's deviation from the historical average of {slope}.
4. Write a 3-sentence behavioral summary in the style of a stoic philosopher focusing on the risk of these specific choices.

### OUTPUT JSON FORMAT
{OUTPUT_FORMAT}
"""
