def surrogatepass(code):
    return code.encode('utf-16', 'surrogatepass').decode('utf-16')

# Network
md_network                          = surrogatepass('\udb81\udef3')
md_network_off                      = surrogatepass('\udb83\udc9b')
md_wifi_strength_4                  = surrogatepass('\udb82\udd28')

# Direction
cod_arrow_small_down                = surrogatepass('\uea9d')
cod_arrow_small_up                  = surrogatepass('\ueaa0')

# Misc
md_alert                            = surrogatepass('\udb80\udc26')
icon_spacer                         = '  '
