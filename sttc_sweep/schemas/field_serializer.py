import numpy as np
import quantities as pq

def serialize_quantity(value) -> dict:
    if value is None:
        return None
    if not isinstance(value, pq.Quantity):
        # plain numbers are seconds
        return {
            "value": np.asarray(value, dtype=np.float64).tolist(),
            "unit": "s"
        }
    return {
        "value": value.magnitude.tolist(),
        "unit": value.dimensionality.string
    }
