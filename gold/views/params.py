from rest_framework.exceptions import ValidationError


def int_query_param(request, name):
    """Optional integer query parameter; a non-integer value is a 400."""
    value = request.query_params.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: "A valid integer is required."})
