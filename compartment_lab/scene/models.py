"""Pydantic models for the JSON scene interchange format.

Field names follow the on-disk format, so units travel in the key
(``v_at_half_max_mv``, ``period_sec``, ``surface_area_square_mm``). Tagged
unions (``time_constant`` and ``current_shape``) are discriminated by their
``"type"`` key. Every model forbids unknown keys.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..engine.channel import ChannelBuilder, IonSelectivity
from ..engine.kinetics import Gating, Instantaneous, LinearExp, Magnitude, Sigmoid, TimeConstant
from ..engine.solution import Solution
from ..engine.stimulator import Envelope, FrequencyRamp, LinearRamp, SquareWave, Stimulator


class SceneModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class MagnitudeModel(SceneModel):
    v_at_half_max_mv: float
    slope: float

    def to_domain(self) -> Magnitude:
        return Magnitude(v_at_half_max=self.v_at_half_max_mv, slope=self.slope)


class InstantaneousModel(SceneModel):
    type: Literal["Instantaneous"] = "Instantaneous"


class SigmoidModel(SceneModel):
    type: Literal["Sigmoid"] = "Sigmoid"
    v_at_max_tau_mv: float
    c_base: float
    c_amp: float
    sigma: float


class LinearExpModel(SceneModel):
    type: Literal["LinearExp"] = "LinearExp"
    coef: float
    v_offset_mv: float
    inner_coef: float


TimeConstantModel = Annotated[
    Union[InstantaneousModel, SigmoidModel, LinearExpModel],
    Field(discriminator="type"),
]


def time_constant_to_domain(model: InstantaneousModel | SigmoidModel | LinearExpModel) -> TimeConstant:
    if isinstance(model, SigmoidModel):
        return Sigmoid(
            v_at_max_tau=model.v_at_max_tau_mv,
            c_base=model.c_base,
            c_amp=model.c_amp,
            sigma=model.sigma,
        )
    if isinstance(model, LinearExpModel):
        return LinearExp(coef=model.coef, v_offset=model.v_offset_mv, inner_coef=model.inner_coef)
    return Instantaneous()


def time_constant_from_domain(law: TimeConstant) -> InstantaneousModel | SigmoidModel | LinearExpModel:
    match law:
        case Sigmoid():
            return SigmoidModel(
                v_at_max_tau_mv=law.v_at_max_tau,
                c_base=law.c_base,
                c_amp=law.c_amp,
                sigma=law.sigma,
            )
        case LinearExp():
            return LinearExpModel(coef=law.coef, v_offset_mv=law.v_offset, inner_coef=law.inner_coef)
        case _:
            return InstantaneousModel()


class GatingModel(SceneModel):
    gates: int = Field(..., ge=1, description="Number of identical gates")
    magnitude: MagnitudeModel
    time_constant: TimeConstantModel

    def to_domain(self) -> Gating:
        return Gating(
            gates=self.gates,
            magnitude=self.magnitude.to_domain(),
            time_constant=time_constant_to_domain(self.time_constant),
        )

    @classmethod
    def from_domain(cls, gating: Gating) -> "GatingModel":
        return cls(
            gates=gating.gates,
            magnitude=MagnitudeModel(
                v_at_half_max_mv=gating.magnitude.v_at_half_max,
                slope=gating.magnitude.slope,
            ),
            time_constant=time_constant_from_domain(gating.time_constant),
        )


class IonSelectivityModel(SceneModel):
    na: float = Field(default=0.0, ge=0.0)
    k: float = Field(default=0.0, ge=0.0)
    ca: float = Field(default=0.0, ge=0.0)
    cl: float = Field(default=0.0, ge=0.0)

    def to_domain(self) -> IonSelectivity:
        return IonSelectivity(na=self.na, k=self.k, ca=self.ca, cl=self.cl)


class ChannelModel(SceneModel):
    activation: GatingModel | None = None
    inactivation: GatingModel | None = None
    ion_selectivity: IonSelectivityModel

    def to_domain(self) -> ChannelBuilder:
        return ChannelBuilder(
            activation=None if self.activation is None else self.activation.to_domain(),
            inactivation=None if self.inactivation is None else self.inactivation.to_domain(),
            ion_selectivity=self.ion_selectivity.to_domain(),
        )

    @classmethod
    def from_domain(cls, builder: ChannelBuilder) -> "ChannelModel":
        selectivity = builder.ion_selectivity
        return cls(
            activation=None if builder.activation is None else GatingModel.from_domain(builder.activation),
            inactivation=None if builder.inactivation is None else GatingModel.from_domain(builder.inactivation),
            ion_selectivity=IonSelectivityModel(
                na=selectivity.na,
                k=selectivity.k,
                ca=selectivity.ca,
                cl=selectivity.cl,
            ),
        )


class MembraneChannelModel(SceneModel):
    channel: ChannelModel
    siemens_per_square_cm: float = Field(..., ge=0.0)


class MembraneModel(SceneModel):
    membrane_channels: List[MembraneChannelModel] = Field(default_factory=list)
    capacitance_farads_per_square_cm: float = Field(default=1e-6, gt=0.0)


# ---------------------------------------------------------------------------
# Neurons and stimulators
# ---------------------------------------------------------------------------


class SceneSegment(SceneModel):
    """One SWC-style morphology sample; coordinates and radius in microns."""

    id: int
    type: int = Field(..., ge=1, description="1-based index into the neuron's membranes")
    x: float
    y: float
    z: float
    r: float = Field(..., gt=0.0)
    parent: int = -1


class NeuronModel(SceneModel):
    segments: List[SceneSegment] = Field(..., min_length=1)
    membranes: List[MembraneModel] = Field(default_factory=list)


class Location(SceneModel):
    x_mm: float = 0.0
    y_mm: float = 0.0
    z_mm: float = 0.0


class EnvelopeModel(SceneModel):
    period_sec: float
    onset_sec: float
    offset_sec: float


class SquareWaveModel(SceneModel):
    type: Literal["SquareWave"] = "SquareWave"
    on_current_uamps_per_square_cm: float
    off_current_uamps_per_square_cm: float


class LinearRampModel(SceneModel):
    type: Literal["LinearRamp"] = "LinearRamp"
    start_current_uamps_per_square_cm: float
    end_current_uamps_per_square_cm: float
    off_current_uamps_per_square_cm: float


class FrequencyRampModel(SceneModel):
    type: Literal["FrequencyRamp"] = "FrequencyRamp"
    on_amplitude_uamps_per_square_cm: float
    offset_current_uamps_per_square_cm: float
    start_frequency_hz: float
    end_frequency_hz: float


CurrentShapeModel = Annotated[
    Union[SquareWaveModel, LinearRampModel, FrequencyRampModel],
    Field(discriminator="type"),
]


class StimulatorModel(SceneModel):
    envelope: EnvelopeModel
    current_shape: CurrentShapeModel

    def to_domain(self) -> Stimulator:
        envelope = Envelope(
            period=self.envelope.period_sec,
            onset=self.envelope.onset_sec,
            offset=self.envelope.offset_sec,
        )
        shape = self.current_shape
        if isinstance(shape, SquareWaveModel):
            current_shape = SquareWave(
                on_current=shape.on_current_uamps_per_square_cm,
                off_current=shape.off_current_uamps_per_square_cm,
            )
        elif isinstance(shape, LinearRampModel):
            current_shape = LinearRamp(
                start_current=shape.start_current_uamps_per_square_cm,
                end_current=shape.end_current_uamps_per_square_cm,
                off_current=shape.off_current_uamps_per_square_cm,
            )
        else:
            current_shape = FrequencyRamp(
                on_amplitude=shape.on_amplitude_uamps_per_square_cm,
                offset_current=shape.offset_current_uamps_per_square_cm,
                start_frequency=shape.start_frequency_hz,
                end_frequency=shape.end_frequency_hz,
            )
        return Stimulator(envelope=envelope, current_shape=current_shape)


class StimulatorSegmentModel(SceneModel):
    stimulator: StimulatorModel
    segment: int = Field(..., ge=0)


class SceneNeuron(SceneModel):
    neuron: NeuronModel
    location: Location = Field(default_factory=Location)
    stimulator_segments: List[StimulatorSegmentModel] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Synapses
# ---------------------------------------------------------------------------


class SolutionModel(SceneModel):
    """Ion concentrations in molar."""

    na: float = Field(..., ge=0.0)
    k: float = Field(..., ge=0.0)
    ca: float = Field(..., ge=0.0)
    cl: float = Field(..., ge=0.0)

    def to_domain(self) -> Solution:
        return Solution(na=self.na, k=self.k, ca=self.ca, cl=self.cl)

    @classmethod
    def from_domain(cls, solution: Solution) -> "SolutionModel":
        return cls(**solution.as_dict())


class TransmitterConcentrationsModel(SceneModel):
    glutamate_molar: float = Field(default=0.0, ge=0.0)
    gaba_molar: float = Field(default=0.0, ge=0.0)


class TargetConcentrationModel(SceneModel):
    min_molar: float
    max_molar: float
    v_at_half_max_mv: float
    slope: float


class TransmitterPumpParamsModel(SceneModel):
    target_concentration: TargetConcentrationModel
    time_constant: TimeConstantModel


class TransmitterPumpModel(SceneModel):
    transmitter: str
    transmitter_pump_params: TransmitterPumpParamsModel


class SensitivityModel(SceneModel):
    transmitter: str
    concentration_at_half_max_molar: float
    slope: float


class ReceptorModel(SceneModel):
    membrane_channel: MembraneChannelModel
    neurotransmitter_sensitivity: SensitivityModel


class SynapseMembranesModel(SceneModel):
    cleft_solution: SolutionModel
    transmitter_concentrations: TransmitterConcentrationsModel = Field(
        default_factory=TransmitterConcentrationsModel
    )
    presynaptic_pumps: List[TransmitterPumpModel] = Field(default_factory=list)
    postsynaptic_receptors: List[ReceptorModel] = Field(default_factory=list)
    surface_area_square_mm: float = Field(..., gt=0.0)


class SceneSynapse(SceneModel):
    pre_neuron: int = Field(..., ge=0)
    pre_segment: int = Field(..., ge=0)
    post_neuron: int = Field(..., ge=0)
    post_segment: int = Field(..., ge=0)
    synapse_membranes: SynapseMembranesModel


class Scene(SceneModel):
    neurons: List[SceneNeuron] = Field(default_factory=list)
    synapses: List[SceneSynapse] = Field(default_factory=list)


__all__ = [
    "ChannelModel",
    "CurrentShapeModel",
    "EnvelopeModel",
    "FrequencyRampModel",
    "GatingModel",
    "InstantaneousModel",
    "IonSelectivityModel",
    "LinearExpModel",
    "LinearRampModel",
    "Location",
    "MagnitudeModel",
    "MembraneChannelModel",
    "MembraneModel",
    "NeuronModel",
    "ReceptorModel",
    "Scene",
    "SceneModel",
    "SceneNeuron",
    "SceneSegment",
    "SceneSynapse",
    "SensitivityModel",
    "SigmoidModel",
    "SolutionModel",
    "SquareWaveModel",
    "StimulatorModel",
    "StimulatorSegmentModel",
    "SynapseMembranesModel",
    "TargetConcentrationModel",
    "TimeConstantModel",
    "TransmitterConcentrationsModel",
    "TransmitterPumpModel",
    "TransmitterPumpParamsModel",
    "time_constant_from_domain",
    "time_constant_to_domain",
]
