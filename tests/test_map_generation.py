import logging

import pytest

from cellmap.mapgen import (
    GenerationFailed,
    GeneratorConfig,
    RoomGenerator,
    TemplateError,
    generate_map,
    make_generator,
)
from cellmap.mapgen.pipeline import attempt_seeds
from map_test_utils import make_template


def test_same_seed_same_map(template_dir):
    seed = 314159
    runs = [generate_map("crypt", seed, template_root=template_dir) for _ in range(3)]
    assert runs[0] == runs[1] == runs[2]
    assert runs[0].cells == runs[2].cells
    assert len({(r.width, r.height, r.used_seed) for r in runs}) == 1


def test_seed_is_recorded(template_dir):
    m = generate_map("halls", 99, template_root=template_dir)
    assert m.seed == 99
    assert m.attempts >= 1
    d = m.to_dict()
    assert d["seed"] == 99
    assert len(d["cells"]) == len(m.cells)
    assert set(d["cells"][0]["doors"]) == {"north", "south", "east", "west"}


def test_single_unit_grid():
    m = RoomGenerator(make_template(1, 1, [(1, 1)])).generate(seed=0)
    assert len(m.cells) == 1
    only = m.cells[0]
    assert (only.x, only.y, only.width, only.height) == (0, 0, 1, 1)
    assert only.door_count() == 0
    assert m.start == m.end == 0
    assert m.path == [0]
    assert m.extra_links == []


def test_full_tiling_never_retries():
    gen = RoomGenerator(make_template((12, 16), (12, 16), [(1, 1), (2, 2), (1, 3)]))
    for seed in range(5):
        m = gen.generate(seed)
        assert m.attempts == 1
        assert m.used_seed == seed
        assert 12 <= m.width <= 16 and 12 <= m.height <= 16


def test_gap_at_end_point_exhausts_retries(caplog):
    gen = RoomGenerator(make_template(3, 3, [(2, 2)]), GeneratorConfig(max_attempts=3))
    with caplog.at_level(logging.WARNING, logger="cellmap.mapgen.pipeline"):
        with pytest.raises(GenerationFailed) as info:
            gen.generate(seed=1)
    assert info.value.attempts == 3
    assert sum("attempt" in r.getMessage() for r in caplog.records) == 3


def test_catalog_too_large_for_grid_fails_fast():
    with pytest.raises(TemplateError):
        RoomGenerator(make_template(3, 3, [(5, 5)]))


def test_unknown_generator_rejected():
    template = make_template(5, 5, [(1, 1)])
    template.generator = "maze"
    with pytest.raises(TemplateError):
        make_generator(template)


def test_attempt_seeds_are_deterministic():
    first = list(attempt_seeds(10, 4))
    assert first[0] == 10
    assert len(first) == 4
    assert first == list(attempt_seeds(10, 4))


def test_phases_logged_and_timed(caplog, template_dir):
    with caplog.at_level(logging.DEBUG, logger="cellmap.mapgen"):
        m = generate_map("crypt", 11, template_root=template_dir)
    messages = [r.getMessage() for r in caplog.records]
    assert any(msg.startswith("Building the cells took") for msg in messages)
    assert any(msg.startswith("Adding doors took") for msg in messages)
    assert set(m.metrics["phase_ms"]) == {
        "Building the cells",
        "Building the neighbour graph",
        "Running the shortest path search",
        "Selecting cells",
        "Adding doors",
    }
    assert m.metrics["cells_packed"] >= m.metrics["cells_selected"]


def test_random_seed_when_omitted(template_dir):
    m = generate_map("crypt", template_root=template_dir)
    assert isinstance(m.seed, int)
    assert m.cells
