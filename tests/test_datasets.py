import numpy as np
import pandas as pd
import pytest

import report_settings
from correlation_utils.datasets import (
    append_points,
    augment_with_outliers,
    build_outlier_rows,
    draw_subsample,
    load_anscombe_wide,
    melt_paired_columns,
    pivot_paired_columns,
    sample_bivariate_normal
)
from correlation_utils.exceptions import InvalidParameterError, SubsampleSizeError


class TestAnscombeReshape:
    def test_long_form_has_one_row_per_point_and_set(self, anscombe):
        assert len(anscombe) == 44
        assert list(anscombe.columns) == ['observation', 'set', 'x', 'y', 'label']
        assert list(anscombe['label'].unique()) == ['Set 1', 'Set 2', 'Set 3', 'Set 4']
        assert (anscombe.groupby('set').size() == 11).all()

    def test_long_form_pairs_values_by_suffix(self, anscombe):
        wide = load_anscombe_wide()
        set4 = anscombe[anscombe['set'] == 4]
        np.testing.assert_array_equal(set4['x'].to_numpy(), wide['x4'].to_numpy())
        np.testing.assert_array_equal(set4['y'].to_numpy(), wide['y4'].to_numpy())

    def test_wide_to_long_to_wide_reproduces_table(self):
        wide = load_anscombe_wide()
        restored = pivot_paired_columns(melt_paired_columns(wide))
        pd.testing.assert_frame_equal(restored, wide)

    def test_non_numeric_suffix_is_kept_as_group(self):
        wide = pd.DataFrame({'xa': [1.0, 2.0], 'xb': [5.0, 6.0], 'ya': [3.0, 4.0], 'yb': [7.0, 8.0]})
        long = melt_paired_columns(wide)
        assert list(long['set'].unique()) == ['a', 'b']
        pd.testing.assert_frame_equal(pivot_paired_columns(long), wide)

    def test_zero_padded_suffixes_survive_round_trip(self):
        wide = pd.DataFrame({'x01': [1.0, 2.0], 'x02': [5.0, 6.0], 'y01': [3.0, 4.0], 'y02': [7.0, 8.0]})
        long = melt_paired_columns(wide)
        assert list(long['set'].unique()) == ['01', '02']
        pd.testing.assert_frame_equal(pivot_paired_columns(long), wide)

    def test_missing_partner_column_raises(self):
        wide = pd.DataFrame({'x1': [1.0], 'y1': [2.0], 'x2': [3.0]})
        with pytest.raises(InvalidParameterError):
            melt_paired_columns(wide)

    def test_no_matching_columns_raises(self):
        with pytest.raises(InvalidParameterError):
            melt_paired_columns(pd.DataFrame({'a': [1.0], 'b': [2.0]}))


class TestBivariateNormal:
    def test_same_seed_reproduces_sample(self):
        first = sample_bivariate_normal((10.0, 5.0), [[1.0, -0.7], [-0.7, 1.0]], 500, seed=42)
        second = sample_bivariate_normal((10.0, 5.0), [[1.0, -0.7], [-0.7, 1.0]], 500, seed=42)
        pd.testing.assert_frame_equal(first, second)

    def test_different_seed_changes_sample(self):
        first = sample_bivariate_normal((10.0, 5.0), [[1.0, -0.7], [-0.7, 1.0]], 50, seed=1)
        second = sample_bivariate_normal((10.0, 5.0), [[1.0, -0.7], [-0.7, 1.0]], 50, seed=2)
        assert not first.equals(second)

    def test_sample_follows_population(self, bivariate_full):
        assert bivariate_full.shape == (500, 2)
        assert bivariate_full['x'].mean() == pytest.approx(10.0, abs=0.2)
        assert bivariate_full['y'].mean() == pytest.approx(5.0, abs=0.2)
        assert bivariate_full['x'].corr(bivariate_full['y']) == pytest.approx(-0.7, abs=0.1)

    @pytest.mark.parametrize('cov', [
        [[1.0, 2.0], [2.0, 1.0]],        # not positive semi-definite
        [[1.0, 0.5], [-0.5, 1.0]],       # not symmetric
        [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
        [[1.0, np.nan], [np.nan, 1.0]],
    ])
    def test_invalid_covariance_raises(self, cov):
        with pytest.raises(InvalidParameterError):
            sample_bivariate_normal((0.0, 0.0), cov, 10, seed=0)

    def test_singular_covariance_is_accepted(self):
        sample = sample_bivariate_normal((0.0, 0.0), [[1.0, 1.0], [1.0, 1.0]], 10, seed=0)
        assert len(sample) == 10

    def test_wrong_mean_length_raises(self):
        with pytest.raises(InvalidParameterError):
            sample_bivariate_normal((0.0, 0.0, 0.0), [[1.0, 0.0], [0.0, 1.0]], 10, seed=0)

    @pytest.mark.parametrize('size', [0, -5, 2.5, True])
    def test_non_positive_or_non_integer_size_raises(self, size):
        with pytest.raises(InvalidParameterError):
            sample_bivariate_normal((0.0, 0.0), [[1.0, 0.0], [0.0, 1.0]], size, seed=0)


class TestSubsample:
    def test_subsample_is_deterministic(self, bivariate_full):
        first = draw_subsample(bivariate_full, 15, seed=7)
        second = draw_subsample(bivariate_full, 15, seed=7)
        assert len(first) == 15
        pd.testing.assert_frame_equal(first, second)

    def test_subsample_rows_come_from_source(self, bivariate_full):
        sample = draw_subsample(bivariate_full, 50, seed=7)
        pd.testing.assert_frame_equal(sample, bivariate_full.loc[sample.index])

    def test_full_size_subsample_keeps_every_row(self, bivariate_full):
        sample = draw_subsample(bivariate_full, 500, seed=7)
        assert sorted(sample.index) == list(bivariate_full.index)

    def test_subsample_larger_than_source_raises(self, bivariate_full):
        with pytest.raises(SubsampleSizeError):
            draw_subsample(bivariate_full, 501, seed=7)

    def test_zero_size_raises(self, bivariate_full):
        with pytest.raises(InvalidParameterError):
            draw_subsample(bivariate_full, 0, seed=7)


class TestAppendPoints:
    def test_appends_copy_and_flags_new_rows(self, bivariate_full):
        extended = append_points(bivariate_full, [{'x': 18.0, 'y': 8.0}], flag_column='added')
        assert len(extended) == 501
        assert extended['added'].sum() == 1
        assert extended.iloc[-1][['x', 'y']].tolist() == [18.0, 8.0]
        assert 'added' not in bivariate_full.columns

    def test_unknown_column_raises(self, bivariate_full):
        with pytest.raises(InvalidParameterError):
            append_points(bivariate_full, [{'z': 1.0}])

    def test_no_points_raises(self, bivariate_full):
        with pytest.raises(InvalidParameterError):
            append_points(bivariate_full, [])


class TestCarsDataset:
    def test_bundled_table(self, cars):
        assert cars.shape == (32, 11)
        assert cars.index.name == 'model'
        assert cars['mpg'].mean() == pytest.approx(20.090625)
        assert cars['wt'].mean() == pytest.approx(3.21725)

    def test_outlier_rows_offset_by_multiples_of_stdev(self, cars):
        rows = build_outlier_rows(cars, 'wt', 'mpg', (2, 8))
        assert list(rows.index) == ['outlier +2 sd', 'outlier +8 sd']
        assert rows.loc['outlier +2 sd', 'wt'] == pytest.approx(cars['wt'].mean() + 2 * cars['wt'].std())
        assert rows.loc['outlier +8 sd', 'mpg'] == pytest.approx(cars['mpg'].mean() + 8 * cars['mpg'].std())

    def test_augmented_dataset(self, cars, cars_augmented):
        assert len(cars_augmented) == 32 + len(report_settings.OUTLIER_MULTIPLIERS)
        assert list(cars_augmented.columns) == ['wt', 'mpg', 'is_outlier']
        assert cars_augmented['is_outlier'].sum() == len(report_settings.OUTLIER_MULTIPLIERS)
        pd.testing.assert_frame_equal(
            cars_augmented.loc[~cars_augmented['is_outlier'], ['wt', 'mpg']],
            cars[['wt', 'mpg']],
            check_names=False
        )

    def test_missing_column_raises(self, cars):
        with pytest.raises(InvalidParameterError):
            augment_with_outliers(cars, 'weight', 'mpg', (2, 3))

    def test_empty_multipliers_raise(self, cars):
        with pytest.raises(InvalidParameterError):
            build_outlier_rows(cars, 'wt', 'mpg', ())
