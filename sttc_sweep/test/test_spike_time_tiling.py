# -*- coding: utf-8 -*-
"""
Unit tests for the spike_time_tiling module.

:copyright: Copyright 2014-2024 by the Elephant team, see `doc/authors.rst`.
:license: Modified BSD, see LICENSE.txt for details.
"""

import inspect
import math
import unittest
import warnings

import neo
import numpy as np
import quantities as pq
from numpy.testing import assert_array_equal, assert_array_almost_equal

import sttc_sweep.spike_time_tiling as stt
from sttc_sweep.schemas.function_validator import validation_disabled


class ClipToWindowTestCase(unittest.TestCase):

    def setUp(self):
        self.times = np.array([-5.0, 0.0, 0.5, 1.0, 5.0])

    def test_clip_inclusive_bounds(self):
        clipped = stt.clip_to_window(self.times, 0.0, 1.0)
        assert_array_equal(clipped, [0.0, 0.5, 1.0])

    def test_clip_outside_entries(self):
        clipped = stt.clip_to_window([-5.0, 0.5, 5.0], 0.0, 1.0)
        assert_array_equal(clipped, [0.5])

    def test_clip_is_view(self):
        original = self.times.copy()
        clipped = stt.clip_to_window(self.times, 0.0, 1.0)
        self.assertTrue(np.shares_memory(clipped, self.times))
        assert_array_equal(self.times, original)

    def test_clip_idempotent(self):
        clipped = stt.clip_to_window(self.times, 0.0, 1.0)
        assert_array_equal(stt.clip_to_window(clipped, 0.0, 1.0), clipped)

    def test_clip_empty(self):
        self.assertEqual(len(stt.clip_to_window(self.times, 2.0, 3.0)), 0)
        self.assertEqual(len(stt.clip_to_window(np.array([]), 0.0, 1.0)), 0)


class RunPTestCase(unittest.TestCase):

    def test_exact_matches_at_zero_dt(self):
        self.assertEqual(stt.run_p([1.0, 2.0, 3.0], [2.0], 0.0), 1)
        self.assertEqual(stt.run_p([1.0, 2.0, 3.0], [1.5, 2.5], 0.0), 0)

    def test_counts_each_spike_once(self):
        self.assertEqual(stt.run_p([1.0], [0.9, 1.0, 1.1], 0.25), 1)

    def test_shared_cursor(self):
        self.assertEqual(stt.run_p([1.0, 2.0, 3.0], [1.5, 2.5], 0.5), 3)
        self.assertEqual(stt.run_p([1.5, 2.5], [1.0, 2.0, 3.0], 0.5), 2)
        self.assertEqual(stt.run_p([1.0, 2.0, 3.0], [1.5, 2.5], 0.25), 0)

    def test_empty_other_train(self):
        self.assertEqual(stt.run_p([1.0, 2.0], [], 1.0), 0)


class RunTTestCase(unittest.TestCase):

    def test_no_overlap(self):
        self.assertAlmostEqual(stt.run_t([1.0, 3.0], 0.5, 0.0, 4.0), 2.0)

    def test_adjacent_overlap(self):
        self.assertAlmostEqual(stt.run_t([1.0, 1.5, 3.0], 0.5, 0.0, 4.0),
                               2.5)

    def test_both_boundaries_clipped(self):
        self.assertAlmostEqual(stt.run_t([0.25, 3.75], 0.5, 0.0, 4.0), 1.5)

    def test_single_spike(self):
        self.assertAlmostEqual(stt.run_t([2.0], 0.5, 0.0, 4.0), 1.0)
        self.assertAlmostEqual(stt.run_t([0.25], 0.5, 0.0, 4.0), 0.75)
        self.assertAlmostEqual(stt.run_t([3.75], 0.5, 0.0, 4.0), 0.75)

    def test_single_spike_clips_start_only(self):
        # the stop is not clipped once the start was
        self.assertAlmostEqual(stt.run_t([0.25], 0.5, 0.0, 0.5), 0.75)

    def test_zero_dt(self):
        self.assertEqual(stt.run_t([1.0, 1.0, 3.0], 0.0, 0.0, 4.0), 0.0)


class DeltaTSweepTestCase(unittest.TestCase):

    def test_exact_multiple(self):
        dt_values = stt.delta_t_sweep(0.002)
        assert_array_equal(dt_values, [0.0, 0.001, 0.002])

    def test_rounded_up(self):
        dt_values = stt.delta_t_sweep(0.0025)
        self.assertEqual(len(dt_values), 4)
        self.assertEqual(dt_values[-1], 0.003)

    def test_zero(self):
        assert_array_equal(stt.delta_t_sweep(0), [0.0])

    def test_quantity(self):
        assert_array_equal(stt.delta_t_sweep(2 * pq.ms), [0.0, 0.001, 0.002])

    def test_values_are_k_over_1000(self):
        max_dt = 0.0371
        dt_values = stt.delta_t_sweep(max_dt)
        self.assertEqual(len(dt_values), math.ceil(max_dt / 0.001) + 1)
        for k, value in enumerate(dt_values):
            self.assertEqual(value, k / 1000)

    def test_negative(self):
        self.assertRaises(ValueError, stt.delta_t_sweep, -0.001)

    def test_bool(self):
        self.assertRaises(TypeError, stt.delta_t_sweep, True)
        self.assertRaises(TypeError, stt.delta_t_sweep, np.bool_(False))


class SpikeTimeTilingCoefficientSweepTestCase(unittest.TestCase):

    def setUp(self):
        # These two arrays must be such that they do not have coincidences
        # spanning across two neighbor bins assuming ms bins [0,1),[1,2),...
        self.test_array_1d_1 = [
            1.3, 7.56, 15.87, 28.23, 30.9, 34.2, 38.2, 43.2]
        self.test_array_1d_2 = [
            1.02, 2.71, 18.82, 28.46, 28.79, 43.6]

        # Build spike trains
        self.st_1 = neo.SpikeTrain(
            self.test_array_1d_1, units='ms', t_stop=50.)
        self.st_2 = neo.SpikeTrain(
            self.test_array_1d_2, units='ms', t_stop=50.)

    def test_sttc_sweep(self):
        coefficients, dt_values = stt.sttc_sweep(
            self.st_1, self.st_2, max_dt=5 * pq.ms, return_dt=True)
        self.assertEqual(dt_values[5], 0.005)
        self.assertAlmostEqual(coefficients[5], 0.495860165593)

    def test_quantities_and_seconds_agree(self):
        in_seconds = stt.sttc_sweep(
            np.array(self.test_array_1d_1) / 1000.,
            np.array(self.test_array_1d_2) / 1000.,
            max_dt=0.005, window=(0., 0.05))
        in_ms = stt.sttc_sweep(
            self.test_array_1d_1 * pq.ms, self.test_array_1d_2 * pq.ms,
            max_dt=0.005, window=(0 * pq.ms, 50 * pq.ms))
        from_neo = stt.sttc_sweep(self.st_1, self.st_2, max_dt=0.005)
        # no denominator vanishes below dt = 8 ms for these trains
        self.assertTrue(np.all(np.isfinite(in_seconds)))
        assert_array_almost_equal(in_seconds, in_ms)
        assert_array_almost_equal(in_seconds, from_neo)

    def test_near_coincidences(self):
        coefficients, dt_values = stt.sttc_sweep(
            [1.0, 5.0], [1.001, 5.002], max_dt=0.002, window=(0, 10),
            return_dt=True)
        assert_array_equal(dt_values, [0.0, 0.001, 0.002])
        self.assertEqual(len(coefficients), 3)
        self.assertTrue(np.all(np.isfinite(coefficients)))
        self.assertAlmostEqual(coefficients[0], 0.0)
        self.assertAlmostEqual(coefficients[1], 0.4996 / 0.9998)
        self.assertAlmostEqual(coefficients[2], 1.0)

    def test_length_matches_dt_values(self):
        for max_dt in (0, 0.001, 0.0025, 0.0371):
            coefficients, dt_values = stt.sttc_sweep(
                [0.1, 0.2, 0.35], [0.15, 0.3], max_dt=max_dt,
                window=(0, 1), return_dt=True)
            n_steps = math.ceil(max_dt / 0.001) + 1
            self.assertEqual(len(coefficients), n_steps)
            self.assertEqual(len(dt_values), n_steps)

    def test_symmetry(self):
        np.random.seed(13)
        train_a = np.sort(np.random.uniform(0, 2, 40))
        train_b = np.sort(np.random.uniform(0, 2, 25))
        forward = stt.sttc_sweep(train_a, train_b, max_dt=0.05,
                                 window=(0, 2))
        backward = stt.sttc_sweep(train_b, train_a, max_dt=0.05,
                                  window=(0, 2))
        assert_array_equal(forward, backward)

    def test_empty_train(self):
        with self.assertWarns(UserWarning):
            coefficients = stt.sttc_sweep([], [3.0], max_dt=0.004,
                                          window=(0, 10))
        self.assertEqual(len(coefficients), 5)
        self.assertTrue(np.all(np.isnan(coefficients)))

    def test_empty_after_clipping(self):
        with self.assertWarns(UserWarning):
            coefficients = stt.sttc_sweep([-5.0, 5.0], [0.5], max_dt=0.001,
                                          window=(0, 1))
        self.assertTrue(np.all(np.isnan(coefficients)))

    def test_only_window_spikes_participate(self):
        clipped = stt.sttc_sweep([-5.0, 0.5, 5.0], [0.5004, 0.9],
                                 max_dt=0.003, window=(0, 1))
        unclipped = stt.sttc_sweep([0.5], [0.5004, 0.9], max_dt=0.003,
                                   window=(0, 1))
        assert_array_equal(clipped, unclipped)

    def test_spikes_on_window_bounds(self):
        coefficients = stt.sttc_sweep([0.0, 1.0], [0.0, 1.0], max_dt=0.001,
                                      window=(0, 1))
        self.assertTrue(np.all(np.isfinite(coefficients)))
        self.assertAlmostEqual(coefficients[0], 1.0)

    def test_zero_denominator(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            index = stt.sttc([0.5], [0.5], window=(0, 1), dt=0.5)
        self.assertTrue(np.isnan(index))
        self.assertEqual(stt.sttc([0.5], [0.5], window=(0, 1), dt=0.25), 1.0)

    def test_single_dt_matches_sweep(self):
        coefficients = stt.sttc_sweep(self.st_1, self.st_2, max_dt=0.01)
        self.assertEqual(stt.sttc(self.st_1, self.st_2, dt=0.003),
                         coefficients[3])
        self.assertAlmostEqual(stt.sttc(self.st_1, self.st_2),
                               0.495860165593)

    def test_input_not_modified(self):
        train = np.array([-1.0, 0.2, 0.4, 2.0])
        stt.sttc_sweep(train, [0.3], max_dt=0.002, window=(0, 1))
        assert_array_equal(train, [-1.0, 0.2, 0.4, 2.0])

    def test_invalid_input(self):
        self.assertRaises(ValueError, stt.sttc_sweep, [1.0], [1.0],
                          max_dt=-0.001, window=(0, 10))
        self.assertRaises(ValueError, stt.sttc_sweep, [1.0], [1.0],
                          max_dt=0.001, window=(10, 0))
        self.assertRaises(ValueError, stt.sttc_sweep, [1.0], [1.0],
                          max_dt=0.001, window=(1, 1))
        self.assertRaises(TypeError, stt.sttc_sweep, "hello", [1.0],
                          max_dt=0.001, window=(0, 10))
        self.assertRaises(TypeError, stt.sttc_sweep, [1.0], [1.0],
                          max_dt=0.001)
        self.assertRaises(TypeError, stt.sttc_sweep, [1.0] * pq.mV, [1.0],
                          max_dt=0.001, window=(0, 10))

    def test_invalid_input_without_validation(self):
        with validation_disabled():
            self.assertRaises(ValueError, stt.sttc_sweep, [1.0], [1.0],
                              max_dt=-0.001, window=(0, 10))
            self.assertRaises(ValueError, stt.sttc_sweep, [1.0], [1.0],
                              max_dt=0.001, window=(10, 0))
            self.assertRaises(TypeError, stt.sttc_sweep, [[1.0]], [1.0],
                              max_dt=0.001, window=(0, 10))
            self.assertRaises(ValueError, stt.sttc_sweep, [np.nan, 1.0],
                              [1.0], max_dt=0.001, window=(0, 10))
            self.assertRaises(ValueError, stt.sttc, [1.0], [1.0, np.inf],
                              window=(0, 10))
            self.assertRaises(TypeError, stt.sttc_sweep, [1.0], [1.0],
                              max_dt=True, window=(0, 10))
            self.assertRaises(TypeError, stt.sttc, [1.0], [1.0],
                              window=(0, 10), dt=np.bool_(True))

    def test_type_hints(self):
        sweep = inspect.signature(stt.spike_time_tiling_coefficient_sweep)
        self.assertIs(sweep.parameters['spiketrain_i'].annotation,
                      neo.core.SpikeTrain)
        self.assertIs(sweep.parameters['max_dt'].annotation, pq.Quantity)
        self.assertIs(sweep.return_annotation, np.ndarray)
        single = inspect.signature(stt.spike_time_tiling_coefficient)
        self.assertIs(single.parameters['dt'].annotation, pq.Quantity)
        self.assertIs(single.return_annotation, float)

    def test_exist_alias(self):
        self.assertEqual(stt.spike_time_tiling_coefficient_sweep,
                         stt.sttc_sweep)
        self.assertEqual(stt.spike_time_tiling_coefficient, stt.sttc)


class LoggingTestCase(unittest.TestCase):

    def test_logger_has_no_handlers(self):
        self.assertEqual(stt.logger.name, 'sttc_sweep.spike_time_tiling')
        self.assertEqual(stt.logger.handlers, [])
        self.assertTrue(stt.logger.propagate)

    def test_sweep_logs_debug_record(self):
        with self.assertLogs('sttc_sweep', level='DEBUG') as logs:
            stt.sttc_sweep([1.0, 5.0], [1.001, 5.002], max_dt=0.002,
                           window=(0, 10))
        self.assertEqual(len(logs.records), 1)
        self.assertEqual(logs.records[0].levelname, 'DEBUG')
        self.assertIn('2 and 2 spikes, 3 delta-t steps', logs.output[0])


if __name__ == '__main__':
    unittest.main()
