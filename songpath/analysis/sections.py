"""Energy-based section segmentation."""

import numpy as np

from songpath.analysis.envelope import moving_average
from songpath.analysis.models import EnergyPoint, Section


def label_from_energy(energy: float, index: int) -> str:
    """Heuristic label for a section that is not the last one."""
    if index == 0:
        return "intro"
    if energy > 0.7:
        return "chorus"
    if energy > 0.4:
        return "verse"
    return "bridge"


def segment_sections(
    energy_curve: list[EnergyPoint],
    duration: float,
    window: int = 90,
    change_threshold: float = 0.08,
    min_section_frames: int = 150,
) -> list[Section]:
    """Split the track where the smoothed energy jumps.

    ``window`` and ``min_section_frames`` are in energy-curve frames
    (about 3 s and 5 s at 30 fps). The returned sections are contiguous
    and cover [0, duration].
    """
    if len(energy_curve) < 10:
        return [Section(start_time=0.0, end_time=duration, label="intro", energy=0.5)]

    energies = np.array([p.energy for p in energy_curve])
    smoothed = np.clip(moving_average(energies, window // 2, max(0, window // 2 - 1)), 0.0, 1.0)

    sections: list[Section] = []
    section_start = 0
    last_change = 0
    for i in range(1, len(smoothed)):
        change = abs(smoothed[i] - smoothed[i - 1])
        if change > change_threshold and (i - last_change) > min_section_frames:
            avg = float(np.mean(smoothed[section_start:i]))
            start_time = 0.0 if not sections else energy_curve[section_start].time
            sections.append(Section(
                start_time=start_time,
                end_time=energy_curve[i].time,
                label=label_from_energy(avg, len(sections)),
                energy=avg,
            ))
            section_start = i
            last_change = i

    avg = float(np.mean(smoothed[section_start:]))
    sections.append(Section(
        start_time=0.0 if not sections else energy_curve[section_start].time,
        end_time=duration,
        label="intro" if not sections else "outro",
        energy=avg,
    ))
    return sections
