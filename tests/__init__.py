"""
tests

Test package for apigw_synth.
"""
