from datetime import datetime
from typing import List, Tuple

from .models import Compatibility, ModDefinition
from .state import CompatibilityState


def generate_compatibility_report(
    current_version: str,
    state: CompatibilityState,
    current_epoch: str | None,
    results: List[Tuple[ModDefinition, Compatibility]],
) -> str:
    report: List[str] = []
    now = datetime.now()

    report.append("# Mod Compatibility Report")
    report.append(f"Generated on: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    report.append("")

    report.append("## Installation")
    report.append(f"- Installed Version: {current_version}")
    report.append(f"- Compatibility Epoch: {current_epoch or 'unknown'}")
    checked = state.checked.strftime("%Y-%m-%d %H:%M:%S %Z") if state.checked else "never"
    report.append(f"- Epoch Table Last Checked: {checked}")
    report.append("")

    if not state.table.is_empty():
        report.append("## Compatibility Epochs")
        for entry in state.table:
            marker = " (current)" if str(entry) == current_epoch else ""
            report.append(f"- {entry}: since {entry.effective_from.strftime('%Y-%m-%d')}{marker}")
        report.append("")

    for status, title in (
        (Compatibility.OK, "Compatible Mods"),
        (Compatibility.OLD, "Outdated Mods"),
        (Compatibility.UNKNOWN, "Unknown Compatibility"),
    ):
        mods = [mod for mod, result in results if result is status]
        if not mods:
            continue
        report.append(f"## {title}")
        for mod in mods:
            line = f"- {mod.name} {mod.version}".rstrip()
            if mod.compatible_with:
                line += f" (compatible with {mod.compatible_with})"
            else:
                line += f" (released {mod.release_date.strftime('%Y-%m-%d')})"
            report.append(line)
        report.append("")

    return "\n".join(report)
