"""
apigw_synth.gateway

Gateway planning package.

Responsibilities:
- Resolve gateway arguments and every identifier the gateway deployment needs.
"""

# Package marker.
