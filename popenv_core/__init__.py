"""
popenv Core Package.

This package contains the environment generator that feeds synthetic 2D
trials into an external neural-network simulation, including:

- Population codes (OneD, Ring, TwoD, Category) with encode/decode
- Configuration dataclasses with validation
- Run/epoch/trial counters
- The Environment and its feature -> encoder bindings
- Presets and a YAML compiler for environment setups

Values are represented as distributed activation patterns over tuned units
rather than as scalars.
"""

# popenv Core Package

__version__ = "0.1.0"

from .enums import FeatureKind, SamplingMode, TimeScale
from .config import EnvConfig, PopCode2DParams, PopCodeParams, SamplingConfig
from .popcode import Category, DegenerateCodeError, OneD, Ring, TwoD
from .counters import Counter
from .bindings import FeatureBinding
from .env import Environment, TrialSample
from .presets import build_preset

from spatial.sampling import SamplingError

from .compiler import compile_from_dict, compile_from_file, compile_from_yaml
from .metrics import decode_errors, peak_unit, trial_statistics
