"""
The standard declarations that a fresh session starts from.
"""

PRELUDE = """
// Length
make unit_class called Length
make base_unit called Meter, Meters { class: Length, symbol: "m", metric }
make derived_unit called Foot, Feet { symbol: "ft", value: 0.3048 * Meters }

// Time
make unit_class called Time
make base_unit called Second, Seconds {
    class: Time,
    symbol: "s",
    partial_metric,
}
make derived_unit called Minute, Minutes { symbol: "min", value: 60 * Seconds }
make derived_unit called Hour, Hours { symbol: "h", value: 60 * Minutes }

// Mass
make unit_class called Mass
make base_unit called Gram, Grams { class: Mass, symbol: "g", metric }

// Compound dimensions
make label called Velocity for Length / Time
make label called Acceleration for Length / Time / Time

// Constants
make label called Pi for 3.141592653589793
make label called E for 2.718281828459045
make label called GoldenRatio, Phi for 1.618033988749895
"""


def load(instance) -> None:
    """Run the standard declarations in `instance`."""
    instance.execute(PRELUDE)
