# global_parameters.py

import json
import logging
import math

import yaml

from core.exceptions import InvalidParameterError

logger = logging.getLogger("mesh_layout")

NUMERIC_KEYS = {"dist_opt": float, "temp_start": float, "n_iter": int}


class LayoutParameters:
    def __init__(self, initial_params=None):
        """
        all parameters are defined with underscore, _, instead of spaces
        """
        self._params = {
            # Optimal distance between connected vertices (k in the paper).
            "dist_opt": 0.5,
            # Upper bound of the per-axis displacement in the first step;
            # decays linearly to zero over n_iter steps.
            "temp_start": 0.1,
            "n_iter": 1,
        }
        if initial_params:
            self.update(initial_params)

    @classmethod
    def from_file(cls, path):
        """Load parameters from a YAML or JSON mapping.

        The mapping may be flat or nested under ``global_parameters`` so a
        mesh document can double as a parameter file.
        """
        path_str = str(path)
        with open(path_str, "r") as f:
            if path_str.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            elif path_str.endswith(".json"):
                data = json.load(f)
            else:
                logger.error(f"Unsupported parameter file format for: {path_str}")
                raise ValueError(f"Unsupported parameter file format for: {path_str}")

        data = data or {}
        if not isinstance(data, dict):
            raise TypeError(f"{path_str}: parameters must be a mapping")
        if "global_parameters" in data:
            data = data["global_parameters"] or {}
        return cls(data)

    def __getattr__(self, name):
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = value
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = value

    def update(self, params):
        """Update multiple parameters at once."""
        self._params.update(params)
        self.coerce_numeric()

    def coerce_numeric(self):
        """Coerce numeric parameters that may parse as strings in YAML."""
        for key, kind in NUMERIC_KEYS.items():
            val = self._params.get(key)
            if not isinstance(val, str):
                continue
            try:
                num = float(val)
            except ValueError:
                logger.warning("global_parameters.%s should be numeric; got %r", key, val)
                continue
            if kind is int:
                if not num.is_integer():
                    logger.warning(
                        "global_parameters.%s should be an integer; got %r", key, val
                    )
                    continue
                num = int(num)
            self._params[key] = num

    def validate(self):
        """Raise :class:`InvalidParameterError` for out-of-range values."""
        dist_opt = self._params.get("dist_opt")
        if (
            not isinstance(dist_opt, (int, float))
            or not math.isfinite(dist_opt)
            or not dist_opt > 0
        ):
            raise InvalidParameterError(
                "dist_opt", dist_opt, f"dist_opt must be > 0 and finite; got {dist_opt!r}"
            )
        temp_start = self._params.get("temp_start")
        if (
            not isinstance(temp_start, (int, float))
            or not math.isfinite(temp_start)
            or temp_start < 0
        ):
            raise InvalidParameterError(
                "temp_start",
                temp_start,
                f"temp_start must be a finite value >= 0; got {temp_start!r}",
            )
        n_iter = self._params.get("n_iter")
        if isinstance(n_iter, bool) or not isinstance(n_iter, int) or n_iter < 0:
            raise InvalidParameterError(
                "n_iter", n_iter, f"n_iter must be an integer >= 0; got {n_iter!r}"
            )

    def __contains__(self, key):
        """Check if a parameter exists."""
        return key in self._params

    def __repr__(self):
        """String representation for debugging."""
        return f"LayoutParameters({self._params})"

    def to_dict(self):
        """Convert the parameters to a dictionary for serialization."""
        return dict(self._params)
