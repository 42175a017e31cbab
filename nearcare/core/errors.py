# nearcare/core/errors.py


class NearcareError(RuntimeError):
    pass


class GeolocationError(NearcareError):
    pass


class GeolocationUnavailable(GeolocationError):
    pass


class GeolocationDenied(GeolocationError):
    pass


class GeolocationTimeout(GeolocationError):
    pass


class DirectoryFetchFailed(NearcareError):
    pass


class LiveSearchFailed(NearcareError):
    pass


class GeocodeError(NearcareError):
    pass


class GeocodeNotFound(GeocodeError):
    pass
