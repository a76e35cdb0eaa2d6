"""Raw property map keys.

Namespace keys follow the image-property decoder convention of wrapping
sub-map names in braces.
"""

# Sub-map namespaces
EXIF_DICT = '{Exif}'
TIFF_DICT = '{TIFF}'
GPS_DICT = '{GPS}'
IPTC_DICT = '{IPTC}'

# Top-level
ORIENTATION = 'Orientation'
PIXEL_WIDTH = 'PixelWidth'
PIXEL_HEIGHT = 'PixelHeight'

# TIFF
MAKE = 'Make'
MODEL = 'Model'
SOFTWARE = 'Software'
ARTIST = 'Artist'
COPYRIGHT = 'Copyright'
DATE_TIME = 'DateTime'

TIFF_KEYS = frozenset({MAKE, MODEL, SOFTWARE, ARTIST, COPYRIGHT, DATE_TIME})

# IPTC mirrors of TIFF rights fields
IPTC_BYLINE = 'By-line'
IPTC_COPYRIGHT_NOTICE = 'CopyrightNotice'

SYNCED_FIELDS = {
    ARTIST: ((IPTC_DICT, IPTC_BYLINE),),
    COPYRIGHT: ((IPTC_DICT, IPTC_COPYRIGHT_NOTICE),),
}

# EXIF
EXPOSURE_TIME = 'ExposureTime'
F_NUMBER = 'FNumber'
FOCAL_LENGTH = 'FocalLength'
FOCAL_LENGTH_35MM = 'FocalLenIn35mmFilm'

# GPS
GPS_LATITUDE = 'Latitude'
GPS_LATITUDE_REF = 'LatitudeRef'
GPS_LONGITUDE = 'Longitude'
GPS_LONGITUDE_REF = 'LongitudeRef'

# Pseudo-field rendered from the decoded coordinate
LOCATION = 'Location'
