"""Library of published (and a few illustrative) channel templates."""

from __future__ import annotations

from typing import Dict

from .channel import CA, CL, K, NA, ChannelBuilder, IonSelectivity
from .errors import ConfigurationError
from .kinetics import Gating, Instantaneous, LinearExp, Magnitude, Sigmoid

# Giant squid axon (Hodgkin & Huxley).
GIANT_SQUID_NA = ChannelBuilder(
    ion_selectivity=NA,
    activation=Gating(
        gates=3,
        magnitude=Magnitude(v_at_half_max=-40.0, slope=15.0),
        time_constant=Sigmoid(v_at_max_tau=-38.0, c_base=0.04e-3, c_amp=0.46e-3, sigma=30.0),
    ),
    inactivation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-62.0, slope=-7.0),
        time_constant=Sigmoid(v_at_max_tau=-67.0, c_base=0.0012, c_amp=0.0074, sigma=20.0),
    ),
)

GIANT_SQUID_K = ChannelBuilder(
    ion_selectivity=K,
    activation=Gating(
        gates=4,
        magnitude=Magnitude(v_at_half_max=-53.0, slope=15.0),
        time_constant=Sigmoid(v_at_max_tau=-79.0, c_base=1.1e-3, c_amp=4.7e-3, sigma=50.0),
    ),
    inactivation=None,
)

# Illustrative parameters, not fitted to recordings.
GIANT_SQUID_CA = ChannelBuilder(
    ion_selectivity=CA,
    activation=Gating(
        gates=2,
        magnitude=Magnitude(v_at_half_max=0.0, slope=15.0),
        time_constant=Sigmoid(v_at_max_tau=0.0, c_base=0.04e-3, c_amp=0.5e-3, sigma=30.0),
    ),
    inactivation=None,
)

GIANT_SQUID_LEAK = ChannelBuilder(ion_selectivity=CL, activation=None, inactivation=None)

# Rat thalamocortical relay neurons.
RAT_THALAMOCORTICAL_NA_TRANSIENT = ChannelBuilder(
    ion_selectivity=NA,
    activation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-30.0, slope=5.5),
        time_constant=Instantaneous(),
    ),
    inactivation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-70.0, slope=-5.8),
        time_constant=LinearExp(coef=3.0, v_offset=-40.0, inner_coef=1.0 / 33.0),
    ),
)

RAT_THALAMOCORTICAL_K_SLOW = ChannelBuilder(
    ion_selectivity=K,
    activation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-3.0, slope=10.0),
        time_constant=Sigmoid(v_at_max_tau=-50.0, c_base=0.005, c_amp=0.047, sigma=0.030),
    ),
    inactivation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-51.0, slope=-12.0),
        time_constant=Sigmoid(v_at_max_tau=-50.0, c_base=0.360, c_amp=0.1, sigma=50.0),
    ),
)

# Rat CA1 pyramidal cells.
RAT_CA1_HCN_DENDRITE = ChannelBuilder(
    ion_selectivity=IonSelectivity(na=0.55, k=0.45, ca=0.0, cl=0.0),
    activation=None,
    inactivation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-90.0, slope=-8.5),
        time_constant=Sigmoid(v_at_max_tau=-75.0, c_base=10e-3, c_amp=40e-3, sigma=20.0),
    ),
)

RAT_CA1_HCN_SOMA = ChannelBuilder(
    ion_selectivity=IonSelectivity(na=0.35, k=0.65, ca=0.0, cl=0.0),
    activation=None,
    inactivation=Gating(
        gates=1,
        magnitude=Magnitude(v_at_half_max=-82.0, slope=-9.0),
        time_constant=Sigmoid(v_at_max_tau=-75.0, c_base=10e-3, c_amp=50e-3, sigma=20.0),
    ),
)

# Ligand-gated receptors; transmitter gating is applied by the synapse.
# Equal Na/K permeability puts the AMPA reversal potential near 0 mV.
AMPA = ChannelBuilder(
    ion_selectivity=IonSelectivity(na=0.5, k=0.5, ca=0.0, cl=0.0),
    activation=None,
    inactivation=None,
)

GABA_A = ChannelBuilder(ion_selectivity=CL, activation=None, inactivation=None)


CHANNEL_LIBRARY: Dict[str, ChannelBuilder] = {
    "giant_squid.na": GIANT_SQUID_NA,
    "giant_squid.k": GIANT_SQUID_K,
    "giant_squid.ca": GIANT_SQUID_CA,
    "giant_squid.leak": GIANT_SQUID_LEAK,
    "rat_thalamocortical.na_transient": RAT_THALAMOCORTICAL_NA_TRANSIENT,
    "rat_thalamocortical.k_slow": RAT_THALAMOCORTICAL_K_SLOW,
    "rat_ca1.hcn_dendrite": RAT_CA1_HCN_DENDRITE,
    "rat_ca1.hcn_soma": RAT_CA1_HCN_SOMA,
    "receptor.ampa": AMPA,
    "receptor.gaba_a": GABA_A,
}


def get_channel(name: str) -> ChannelBuilder:
    """Return a channel template by its library name."""

    try:
        return CHANNEL_LIBRARY[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown channel '{name}'") from exc


__all__ = [
    "AMPA",
    "CHANNEL_LIBRARY",
    "GABA_A",
    "GIANT_SQUID_CA",
    "GIANT_SQUID_K",
    "GIANT_SQUID_LEAK",
    "GIANT_SQUID_NA",
    "RAT_CA1_HCN_DENDRITE",
    "RAT_CA1_HCN_SOMA",
    "RAT_THALAMOCORTICAL_K_SLOW",
    "RAT_THALAMOCORTICAL_NA_TRANSIENT",
    "get_channel",
]
