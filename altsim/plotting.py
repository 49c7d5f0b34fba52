"""
plotting.py – Flight profile visualisation.
"""

from __future__ import annotations
import numpy as np
import matplotlib.pyplot as plt


def plot_flight_profile(arrays: dict[str, np.ndarray], *, show: bool = True,
                        save_path: str | None = None) -> plt.Figure:
    """
    Plot altitude, speed and flight-path angle against horizontal position.

    Parameters
    ----------
    arrays    : dict returned by ``TelemetryRecorder.as_arrays``
    show      : call plt.show()
    save_path : if given, save to file

    Returns
    -------
    matplotlib Figure
    """
    x = arrays['pos_x_ft']

    fig, (ax_alt, ax_speed, ax_angle) = plt.subplots(3, 1, figsize=(12, 9),
                                                     sharex=True)

    ax_alt.plot(x, arrays['altitude_ft'], color='#1a73e8', lw=2)
    ax_alt.set_ylabel('Altitude [ft]')

    ax_speed.plot(x, arrays['speed_m_min'], color='#0d652d', lw=1.8,
                  label='Total speed')
    ax_speed.plot(x, arrays['vertical_speed_m_min'], color='#e8710a', lw=1.5,
                  ls='--', label='Vertical speed')
    ax_speed.set_ylabel('Speed [m/min]')
    ax_speed.legend(loc='upper right', fontsize=8)

    ax_angle.plot(x, arrays['angle_deg'], color='#d93025', lw=1.5)
    ax_angle.axhline(15.0, color='grey', lw=0.6, ls=':')
    ax_angle.axhline(-15.0, color='grey', lw=0.6, ls=':')
    ax_angle.set_ylabel('Angle [°]')
    ax_angle.set_xlabel('Horizontal position [ft]')

    for ax in (ax_alt, ax_speed, ax_angle):
        ax.grid(True, which='both', ls=':', alpha=0.4)

    duration = arrays['time_s'][-1] if len(arrays['time_s']) else 0.0
    fig.suptitle(f'Flight profile  ({duration:.1f} s simulated)',
                 fontsize=12, fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()

    return fig
