"""
Pricing app: metal rates and the pricing engine.
"""
