"""
Static type catalog.

Identifiers of every record type the exporter knows about, grouped the way
the stages consume them. Quantity types are only exported when discovery
resolves a preferred unit for them.
"""

CHARACTERISTIC_TYPES = frozenset(
    {
        "HKCharacteristicTypeIdentifierDateOfBirth",
        "HKCharacteristicTypeIdentifierBiologicalSex",
        "HKCharacteristicTypeIdentifierBloodType",
        "HKCharacteristicTypeIdentifierFitzpatrickSkinType",
    }
)

CATEGORY_TYPES = frozenset(
    {
        "HKCategoryTypeIdentifierSleepAnalysis",
        "HKCategoryTypeIdentifierAppleStandHour",
        "HKCategoryTypeIdentifierCervicalMucusQuality",
        "HKCategoryTypeIdentifierOvulationTestResult",
        "HKCategoryTypeIdentifierMenstrualFlow",
        "HKCategoryTypeIdentifierIntermenstrualBleeding",
        "HKCategoryTypeIdentifierSexualActivity",
    }
)

_BODY_MEASUREMENTS = [
    "BodyMassIndex",
    "BodyFatPercentage",
    "Height",
    "BodyMass",
    "LeanBodyMass",
]

_FITNESS = [
    "StepCount",
    "DistanceWalkingRunning",
    "DistanceCycling",
    "BasalEnergyBurned",
    "ActiveEnergyBurned",
    "FlightsClimbed",
    "NikeFuel",
]

_VITALS = [
    "HeartRate",
    "BodyTemperature",
    "BasalBodyTemperature",
    "BloodPressureSystolic",
    "BloodPressureDiastolic",
    "RespiratoryRate",
]

_RESULTS = [
    "OxygenSaturation",
    "PeripheralPerfusionIndex",
    "BloodGlucose",
    "NumberOfTimesFallen",
    "ElectrodermalActivity",
    "InhalerUsage",
    "BloodAlcoholContent",
    "ForcedVitalCapacity",
    "ForcedExpiratoryVolume1",
    "PeakExpiratoryFlowRate",
]

_NUTRITION = [
    "DietaryFatTotal",
    "DietaryFatPolyunsaturated",
    "DietaryFatMonounsaturated",
    "DietaryFatSaturated",
    "DietaryCholesterol",
    "DietarySodium",
    "DietaryCarbohydrates",
    "DietaryFiber",
    "DietarySugar",
    "DietaryEnergyConsumed",
    "DietaryProtein",
    "DietaryVitaminA",
    "DietaryVitaminB6",
    "DietaryVitaminB12",
    "DietaryVitaminC",
    "DietaryVitaminD",
    "DietaryVitaminE",
    "DietaryVitaminK",
    "DietaryCalcium",
    "DietaryIron",
    "DietaryThiamin",
    "DietaryRiboflavin",
    "DietaryNiacin",
    "DietaryFolate",
    "DietaryBiotin",
    "DietaryPantothenicAcid",
    "DietaryPhosphorus",
    "DietaryIodine",
    "DietaryMagnesium",
    "DietaryZinc",
    "DietarySelenium",
    "DietaryCopper",
    "DietaryManganese",
    "DietaryChromium",
    "DietaryMolybdenum",
    "DietaryChloride",
    "DietaryPotassium",
    "DietaryCaffeine",
    "DietaryWater",
    "UVExposure",
]

QUANTITY_TYPES = frozenset(
    f"HKQuantityTypeIdentifier{name}"
    for name in _BODY_MEASUREMENTS + _FITNESS + _VITALS + _RESULTS + _NUTRITION
)

CORRELATION_TYPES = frozenset(
    {
        "HKCorrelationTypeIdentifierBloodPressure",
        "HKCorrelationTypeIdentifierFood",
    }
)

WORKOUT_TYPE = "HKWorkoutTypeIdentifier"


def read_types() -> frozenset[str]:
    """All identifiers a run needs read authorization for."""
    return CHARACTERISTIC_TYPES | QUANTITY_TYPES | CATEGORY_TYPES | CORRELATION_TYPES | {WORKOUT_TYPE}
