from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..core.GraphPrimitives import FilterNode, Parameter
from ..core.Types import ParameterKind


# =========================================================================================
# FILTER PALETTE
#
# Built-in filter presets offered by the node editor. Each preset names the
# VapourSynth plugin namespace + function it calls and the parameters (with
# default values) a freshly created node starts with.
#
# Keys are the "filterType" stored in saved graphs.
# =========================================================================================

@dataclass(frozen=True)
class FilterPreset:
    filter_type: str
    display_name: str
    category: str
    plugin_namespace: str
    function_name: str
    defaults: Tuple[Tuple[str, ParameterKind, Any], ...] = ()

    def parameters(self) -> Tuple[Parameter, ...]:
        return tuple(Parameter(name, value, kind) for name, kind, value in self.defaults)


INT = ParameterKind.INT
FLOAT = ParameterKind.FLOAT
STRING = ParameterKind.STRING
BOOL = ParameterKind.BOOL


_PRESETS: List[FilterPreset] = [
    # Resize
    FilterPreset("resize", "Resize", "Resize", "resize", "Lanczos",
                 (("width", INT, 1920), ("height", INT, 1080))),
    FilterPreset("descale", "Descale", "Resize", "descale", "Debicubic",
                 (("width", INT, 1280), ("height", INT, 720), ("b", FLOAT, 0.33), ("c", FLOAT, 0.33))),
    FilterPreset("fmtconv", "FmtConv", "Resize", "fmtc", "resample",
                 (("w", INT, 1920), ("h", INT, 1080), ("kernel", STRING, "spline36"))),
    # Denoise
    FilterPreset("bm3d", "BM3D Denoise", "Denoise", "bm3d", "VAggregate",
                 (("sigma", FLOAT, 3.0),)),
    FilterPreset("dfttest", "DFTTest", "Denoise", "dfttest", "DFTTest",
                 (("sigma", FLOAT, 4.0), ("tbsize", INT, 1))),
    FilterPreset("knlm", "KNLMeansCL", "Denoise", "knlm", "KNLMeansCL",
                 (("d", INT, 1), ("a", INT, 2), ("s", INT, 4), ("h", FLOAT, 1.2))),
    FilterPreset("bilateral", "Bilateral", "Denoise", "bilateral", "Bilateral",
                 (("sigmaS", FLOAT, 3.0), ("sigmaR", FLOAT, 0.02))),
    # Deinterlace
    FilterPreset("eedi3", "EEDI3", "Deinterlace", "eedi3", "eedi3",
                 (("field", INT, 1), ("dh", BOOL, False))),
    FilterPreset("nnedi3", "NNEDI3", "Deinterlace", "nnedi3", "nnedi3",
                 (("field", INT, 1), ("nsize", INT, 0), ("nns", INT, 3))),
    # Sharpen
    FilterPreset("cas", "CAS Sharpen", "Sharpen", "cas", "CAS",
                 (("sharpness", FLOAT, 0.5),)),
    FilterPreset("tcanny", "TCanny", "Sharpen", "tcanny", "TCanny",
                 (("sigma", FLOAT, 1.5), ("mode", INT, 0))),
    # Utility
    FilterPreset("crop", "Crop", "Utility", "std", "Crop",
                 (("left", INT, 0), ("right", INT, 0), ("top", INT, 0), ("bottom", INT, 0))),
    FilterPreset("trim", "Trim", "Utility", "std", "Trim",
                 (("first", INT, 0), ("last", INT, 0))),
]

FILTER_PRESETS: Dict[str, FilterPreset] = {p.filter_type: p for p in _PRESETS}

_BY_CALL: Dict[Tuple[str, str], str] = {
    (p.plugin_namespace, p.function_name): p.filter_type for p in _PRESETS
}


def get_preset(filter_type: str) -> Optional[FilterPreset]:
    return FILTER_PRESETS.get(filter_type)


def list_filters() -> List[FilterPreset]:
    return list(_PRESETS)


def create_filter_node(filter_type: str, **kwargs) -> FilterNode:
    """Create a FilterNode from a palette preset, with the preset's default parameters."""
    preset = FILTER_PRESETS.get(filter_type)
    if preset is None:
        raise ValueError(f"Unknown filter type: {filter_type}")
    return FilterNode(
        display_name=kwargs.pop("display_name", preset.display_name),
        plugin_namespace=preset.plugin_namespace,
        function_name=preset.function_name,
        parameters=kwargs.pop("parameters", preset.parameters()),
        **kwargs,
    )


def filter_type_for(plugin_namespace: str, function_name: str) -> str:
    # Unknown calls map back to their namespace, which is what saved graphs expect.
    return _BY_CALL.get((plugin_namespace, function_name), plugin_namespace)
