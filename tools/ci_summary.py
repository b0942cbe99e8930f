# tools/ci_summary.py
import json
import os
from pathlib import Path

from review_gate.settings import settings

REPORT = Path(".review_gate_report.json")

OUTCOME_EMOJI = {
    "APPROVED": "✅",
    "NOT_APPLICABLE": "✅",
    "RERUN_TRIGGERED": "🔁",
    "NEEDS_REVIEW": "❌",
    "FAILED": "❌",
}


def render(data: dict) -> str:
    title = settings.summary_title or "Review Gate"
    outcome = data.get("outcome", "FAILED")
    pr = data.get("pr_number")

    lines = []
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**Outcome:** {OUTCOME_EMOJI.get(outcome, '❔')} `{outcome}`")
    lines.append("")
    lines.append("| Event | Pull request | Team |")
    lines.append("|:------|-------------:|:-----|")
    lines.append(
        f"| {data.get('event', '—')} | {f'#{pr}' if pr else '—'} | {data.get('team', '—')} |"
    )
    lines.append("")
    message = (data.get("message") or "").strip()
    if message:
        lines.append("> " + message.replace("\n", "\n> "))
        lines.append("")
    requested = data.get("reviewers_requested") or []
    if requested:
        lines.append("## Requested reviewers")
        lines.append("")
        for r in requested:
            lines.append(f"- @{r}")
        lines.append("")
    return "\n".join(lines)


def main() -> int:
    if not settings.enable_job_summary:
        print("Job summary disabled via settings.enable_job_summary.")
        return 0

    if not REPORT.exists():
        print(f"No {REPORT} found; nothing to summarize.")
        return 0

    try:
        data = json.loads(REPORT.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read/parse {REPORT}: {e}")
        return 0

    md = render(data)
    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if summary_path:
        with open(summary_path, "a", encoding="utf-8") as f:
            f.write(md + "\n")
    else:
        # Fallback to stdout if not running in Actions
        print(md)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
