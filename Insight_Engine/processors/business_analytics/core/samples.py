"""
Sample series shown while a dataset is empty.

The renderer flags these as placeholders (ResultStatus.FALLBACK), so they
never pass for real figures.
"""

SAMPLE_DEMAND_DATA = [
    {"period": "2023-01", "quantity": 1200, "is_forecast": False},
    {"period": "2023-02", "quantity": 1250, "is_forecast": False},
    {"period": "2023-03", "quantity": 1300, "is_forecast": False},
    {"period": "2023-04", "quantity": 1280, "is_forecast": False},
    {"period": "2023-05", "quantity": 1350, "is_forecast": False},
    {"period": "2023-06", "quantity": 1400, "is_forecast": False},
    {"period": "2023-07", "quantity": 1450, "is_forecast": False},
    {"period": "2023-08", "quantity": 1500, "is_forecast": False},
    {"period": "2023-09", "quantity": 1550, "is_forecast": False},
    {"period": "2023-10", "quantity": 1600, "is_forecast": False},
    {"period": "2023-11", "quantity": 1650, "is_forecast": False},
    {"period": "2023-12", "quantity": 1700, "is_forecast": False},
]

# (date, Cement, Sand, Gravel, Fly Ash, Water, Admixture)
_SAMPLE_PRICES = [
    ("2023-01-01", 290, 60, 75, 220, 10, 440),
    ("2023-02-01", 295, 62, 78, 225, 11, 445),
    ("2023-03-01", 300, 65, 80, 230, 12, 450),
    ("2023-04-01", 305, 63, 82, 235, 11, 455),
    ("2023-05-01", 310, 64, 79, 240, 12, 460),
    ("2023-06-01", 315, 66, 81, 245, 13, 465),
    ("2023-07-01", 320, 68, 83, 250, 12, 470),
    ("2023-08-01", 325, 67, 85, 255, 13, 475),
    ("2023-09-01", 330, 69, 87, 260, 14, 480),
    ("2023-10-01", 335, 70, 89, 265, 13, 485),
    ("2023-11-01", 340, 72, 91, 270, 14, 490),
    ("2023-12-01", 345, 74, 93, 275, 15, 495),
]

SAMPLE_MATERIAL_DATA = [
    {
        "period": date,
        "Cement": float(cement),
        "Sand": float(sand),
        "Gravel": float(gravel),
        "Fly Ash": float(fly_ash),
        "Water": float(water),
        "Admixture": float(admixture),
    }
    for date, cement, sand, gravel, fly_ash, water, admixture in _SAMPLE_PRICES
]
