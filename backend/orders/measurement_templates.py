"""
Measurement templates per garment type.

Each field lists the usual range in centimetres as a form hint. Validation
only enforces presence of required fields, known field names and the
0 to 500 value bound.
"""

MIN_MEASUREMENT_VALUE = 0
MAX_MEASUREMENT_VALUE = 500


def _field(name, label, min_value, max_value, required=True):
    return {'name': name, 'label': label, 'unit': 'cm', 'required': required, 'min': min_value, 'max': max_value}


MEASUREMENT_TEMPLATES = {
    'SHIRT': {
        'description': 'Standard shirt measurements',
        'fields': [
            _field('neck', 'Neck circumference', 30, 60),
            _field('chest', 'Chest circumference', 70, 150),
            _field('waist', 'Waist circumference', 60, 140),
            _field('shoulder', 'Shoulder width', 35, 60),
            _field('sleeve_length', 'Sleeve length from shoulder', 50, 90),
            _field('shirt_length', 'Shirt length from shoulder to hem', 60, 100),
            _field('cuff', 'Cuff circumference', 15, 30),
        ],
    },
    'SUIT': {
        'description': 'Complete suit measurements (jacket and trouser)',
        'fields': [
            _field('chest', 'Chest circumference', 70, 150),
            _field('waist', 'Waist circumference', 60, 140),
            _field('hip', 'Hip circumference', 80, 160),
            _field('shoulder', 'Shoulder width', 35, 60),
            _field('sleeve_length', 'Sleeve length from shoulder', 50, 90),
            _field('jacket_length', 'Jacket length from shoulder to hem', 60, 100),
            _field('waist_trouser', 'Trouser waist circumference', 60, 140),
            _field('hip_trouser', 'Trouser hip circumference', 80, 160),
            _field('inseam', 'Inseam length', 60, 100),
            _field('outseam', 'Outseam length', 80, 120),
            _field('thigh', 'Thigh circumference', 40, 80),
            _field('knee', 'Knee circumference', 30, 60),
            _field('cuff_trouser', 'Trouser cuff circumference', 20, 50),
            _field('rise', 'Rise', 20, 40),
        ],
    },
    'DRESS': {
        'description': 'Dress measurements',
        'fields': [
            _field('bust', 'Bust circumference', 70, 150),
            _field('waist', 'Waist circumference', 60, 140),
            _field('hip', 'Hip circumference', 80, 160),
            _field('shoulder_to_waist', 'Shoulder to waist', 30, 50),
            _field('waist_to_hem', 'Waist to hem', 50, 100),
            _field('dress_length', 'Dress length', 80, 150),
            _field('sleeve_length', 'Sleeve length', 40, 70, required=False),
            _field('armhole', 'Armhole circumference', 30, 60),
        ],
    },
    'TROUSER': {
        'description': 'Trouser measurements',
        'fields': [
            _field('waist', 'Waist circumference', 60, 140),
            _field('hip', 'Hip circumference', 80, 160),
            _field('inseam', 'Inseam length', 60, 100),
            _field('outseam', 'Outseam length', 80, 120),
            _field('thigh', 'Thigh circumference', 40, 80),
            _field('knee', 'Knee circumference', 30, 60),
            _field('cuff', 'Cuff circumference', 20, 50),
            _field('rise', 'Rise', 20, 40),
        ],
    },
}


def get_template(garment_type):
    return MEASUREMENT_TEMPLATES.get(garment_type)


def required_fields(garment_type):
    template = get_template(garment_type) or {'fields': []}
    return [f['name'] for f in template['fields'] if f['required']]


def validate_measurements(garment_type, measurements):
    """
    Check a measurement map against its garment template.
    Returns a dict of field name -> error message (empty when valid).
    """
    template = get_template(garment_type)
    if template is None:
        return {'garment_type': f'Unknown garment type: {garment_type}'}
    if not isinstance(measurements, dict):
        return {'measurements': 'Measurements must be an object of field names to numbers'}

    errors = {}
    known = {f['name'] for f in template['fields']}
    for name in required_fields(garment_type):
        if measurements.get(name) is None:
            errors[name] = 'This measurement is required'
    for name, value in measurements.items():
        if name not in known:
            errors[name] = f'Unknown measurement for {garment_type}'
            continue
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors[name] = 'Measurement must be a number'
        elif value < MIN_MEASUREMENT_VALUE or value > MAX_MEASUREMENT_VALUE:
            errors[name] = f'Measurement must be between {MIN_MEASUREMENT_VALUE} and {MAX_MEASUREMENT_VALUE}'
    return errors
