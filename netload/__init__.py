##############################################################################
#                                                                            #
#  Objective:                                                                #
#    One-way UDP path measurement: a traffic generator emitting sequenced,   #
#    timestamped datagrams and a traffic receiver deriving loss, delay and   #
#    throughput statistics from them.                                        #
#                                                                            #
#  Features supported:                                                       #
#    - IPv4 and IPv6                                                         #
#    - Configurable packet count, packet size and send rate                  #
#    - Support for TOS/traffic class and TTL/hop limit                       #
#    - Delay (min/max/avg), Jitter (RFC1889), Loss, Throughput statistics    #
#                                                                            #
#  Modes of operation:                                                       #
#    - Traffic Generator                                                     #
#    - Traffic Receiver                                                      #
#    - Loopback (generator and receiver on the local host)                   #
#                                                                            #
#  Limitations:                                                              #
#    Delay is measured one-way and needs synchronized clocks on both hosts.  #
#    Expected packets are derived from the highest sequence number seen, so  #
#    packets lost at the very end of a run are not accounted as lost.        #
#                                                                            #
#  License:                                                                  #
#    Licensed under the BSD license                                          #
#    See LICENSE.md delivered with this project for more information.        #
#                                                                            #
##############################################################################

__title__ = "netload"
__version__ = "1.0"
