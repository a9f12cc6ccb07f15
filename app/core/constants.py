"""Application constants."""

# Unit conversion
LB_TO_KG = 0.453592
CM_PER_M = 100

# BMI bands: lower bound inclusive, upper bound exclusive
BMI_UNDERWEIGHT_BELOW = 18.5
BMI_NORMAL_BELOW = 25.0
BMI_OVERWEIGHT_BELOW = 30.0

# U.S. Navy body fat (male), circumferences and height in cm
NAVY_MALE_WAIST_NECK_COEF = 86.010
NAVY_MALE_HEIGHT_COEF = 70.041
NAVY_MALE_OFFSET = 36.76

# Derived values are stored and reported with this many decimals
METRIC_DECIMALS = 2

REQUIRED_FIELDS = ("name", "sex", "height_cm", "weight_lbs", "waist_cm", "neck_cm")
MEASUREMENT_FIELDS = ("height_cm", "weight_lbs", "waist_cm", "neck_cm")
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Largest derived value (weight_kg, BMI, ratio) the engine will round and report
MAX_DERIVED_VALUE = 1e9
