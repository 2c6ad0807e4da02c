import pytest

from cellmap.mapgen import DoorMask, TemplateError
from cellmap.mapgen.catalog import SizeCatalog


def test_catalog_stores_both_orientations():
    catalog = SizeCatalog([(1, 3)])
    assert (1, 3) in catalog
    assert (3, 1) in catalog
    assert len(catalog) == 2
    assert catalog.max_dimension == 3


def test_fitting_filters_by_cap_and_is_memoised():
    catalog = SizeCatalog([(1, 1), (1, 3), (2, 2)])
    assert catalog.fitting(2, 3) == [(1, 1), (1, 3), (2, 2)]
    assert catalog.fitting(3, 1) == [(1, 1), (3, 1)]
    assert catalog.fitting(0, 5) == []
    assert catalog.fitting(3, 3) is catalog.fitting(3, 3)


def test_fits_within_grid():
    catalog = SizeCatalog([(4, 2)])
    assert catalog.fits_within(2, 4)
    assert catalog.fits_within(4, 2)
    assert not catalog.fits_within(3, 3)


@pytest.mark.parametrize("sizes", [[], [(0, 2)], [(2, -1)]])
def test_invalid_catalog_rejected(sizes):
    with pytest.raises(TemplateError):
        SizeCatalog(sizes)


def test_door_mask_bits():
    mask = DoorMask(4).with_door(2)
    assert mask.offsets() == [2]
    assert mask[2] and not mask[1]
    assert list(mask) == [False, False, True, False]
    assert mask.count() == 1
    assert len(mask) == 4
    # immutable: with_door returns a new mask
    assert DoorMask(4).count() == 0
    with pytest.raises(IndexError):
        mask.with_door(4)
    with pytest.raises(ValueError):
        DoorMask(2, bits=0b1000)
