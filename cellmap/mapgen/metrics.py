from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'attempts': 0,
        'cells_packed': 0,
        'cells_selected': 0,
        'path_length': 0,
        'rooms_recruited': 0,
        'rooms_requested': 0,
        'links_added': 0,
        'links_requested': 0,
        'doors_placed': 0,
        'gap_units': 0,
        'runtime_ms': 0.0,
    }
