import pytest

import report_settings
from correlation_utils.datasets import (
    augment_with_outliers,
    load_anscombe,
    load_mtcars,
    sample_bivariate_normal
)


@pytest.fixture
def anscombe():
    return load_anscombe()


@pytest.fixture
def bivariate_full():
    return sample_bivariate_normal(
        report_settings.BIVARIATE_MEAN,
        report_settings.BIVARIATE_COV,
        report_settings.BIVARIATE_SIZE,
        seed=report_settings.RANDOM_SEED
    )


@pytest.fixture
def cars():
    return load_mtcars()


@pytest.fixture
def cars_augmented(cars):
    return augment_with_outliers(
        cars,
        report_settings.CARS_X_COLUMN,
        report_settings.CARS_Y_COLUMN,
        report_settings.OUTLIER_MULTIPLIERS
    )
