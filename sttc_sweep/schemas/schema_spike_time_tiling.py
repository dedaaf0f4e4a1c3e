import quantities as pq
from typing import (
    Any,
    Optional,
    Self
)
from pydantic import (
    BaseModel,
    Field,
    field_validator,
    model_validator,
    field_serializer
)

import sttc_sweep.schemas.field_validator as fv
import sttc_sweep.schemas.field_serializer as fs
from sttc_sweep.utils import (get_common_start_stop_times,
                              magnitude_in_seconds, window_in_seconds)


class _PydanticSpikeTrainPair(BaseModel):
    """
    Fields and checks shared by the STTC entry points: two spike trains and
    the analysis window they are clipped to.
    """

    spiketrain_i: Any = Field(..., description="Spike times of train i, sorted ascending")
    spiketrain_j: Any = Field(..., description="Spike times of train j, sorted ascending")
    window: Optional[Any] = Field(None, description="Analysis window (start, stop); "
                                                    "defaults to the shared t_start/t_stop of neo spike trains")

    @field_serializer("window", mode='plain')
    def serialize_window(self, value):
        if isinstance(value, (list, tuple)):
            return [fs.serialize_quantity(bound) for bound in value]
        return fs.serialize_quantity(value)

    @field_validator("spiketrain_i", "spiketrain_j")
    @classmethod
    def validate_spiketrain(cls, v, info):
        return fv.validate_spiketrain(v, info)

    @field_validator("window")
    @classmethod
    def validate_window(cls, v, info):
        return fv.validate_window(v, info)

    def _validate_pair(self):
        fv.model_validate_window_source(self.window, self.spiketrain_i,
                                        self.spiketrain_j)
        if self.window is None:
            t_start, t_stop = get_common_start_stop_times(
                [self.spiketrain_i, self.spiketrain_j])
            start = magnitude_in_seconds(t_start).item()
            stop = magnitude_in_seconds(t_stop).item()
        else:
            start, stop = window_in_seconds(self.window)
        fv.model_validate_window_order(start, stop)


class PydanticSpikeTimeTilingCoefficientSweep(_PydanticSpikeTrainPair):
    """
    PyDantic Class to wrap the
    sttc_sweep.spike_time_tiling.spike_time_tiling_coefficient_sweep function
    with additional type checking and json_schema by PyDantic.
    """

    max_dt: Any = Field(..., description="Largest delta-t of the sweep, rounded up to the next millisecond")
    return_dt: Optional[bool] = Field(False, description="Also return the delta-t values")

    @field_serializer("max_dt", mode='plain')
    def serialize_quantity(self, value: pq.Quantity):
        return fs.serialize_quantity(value)

    @field_validator("max_dt")
    @classmethod
    def validate_max_dt(cls, v, info):
        return fv.validate_time_value(v, info)

    @model_validator(mode="after")
    def validate_model(self) -> Self:
        self._validate_pair()
        return self


class PydanticSpikeTimeTilingCoefficient(_PydanticSpikeTrainPair):
    """
    PyDantic Class to wrap the
    sttc_sweep.spike_time_tiling.spike_time_tiling_coefficient function
    with additional type checking and json_schema by PyDantic.
    """

    dt: Any = Field(default_factory=lambda: 0.005 * pq.s, description="Synchronicity window")

    @field_serializer("dt", mode='plain')
    def serialize_quantity(self, value: pq.Quantity):
        return fs.serialize_quantity(value)

    @field_validator("dt")
    @classmethod
    def validate_dt(cls, v, info):
        return fv.validate_time_value(v, info)

    @model_validator(mode="after")
    def validate_model(self) -> Self:
        self._validate_pair()
        return self
