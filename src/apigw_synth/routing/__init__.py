"""
apigw_synth.routing

Route specification compiler package.

Responsibilities:
- Routing configuration models and the typed OpenAPI 3 document.
- Compilation of upstream routes into gateway operations (JWT, CORS).
- Conversion to the Swagger 2.0 document the gateway accepts.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Everything in this package is pure; logging is the only side effect.
