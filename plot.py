import pandas as pd
import matplotlib.pyplot as plt

nodes_path = "nodes.csv"
waypoints_path = "waypoints.csv"

nodes = pd.read_csv(nodes_path, skipinitialspace=True)
df = pd.read_csv(waypoints_path)
df[['x', 'y']] = df[['x', 'y']].astype(float)

plt.figure(figsize=(9, 7))
ax = plt.gca()

# every sensor node
ax.scatter(nodes['x'], nodes['y'], s=18, color='#2B7CD3', alpha=0.8, label='Sensor nodes')

# one polyline per PDV, depot -> stops -> depot
for vehicle, path in df.sort_values(['vehicle', 'step']).groupby('vehicle'):
    ax.plot(path['x'], path['y'], linewidth=1.0, marker='o', markersize=4, alpha=0.9, label=f'PDV {vehicle}')

depot = df[df['step'] == 0].iloc[0]
ax.scatter([depot['x']], [depot['y']], s=120, color='red', marker='s', edgecolor='k', label='Depot')

ax.set_xlabel('x [m]')
ax.set_ylabel('y [m]')
ax.set_title('PDV recharge routes')
ax.grid(True, linestyle='--', alpha=0.3)
ax.legend()
ax.set_aspect('equal', adjustable='box')

plt.tight_layout()
plt.savefig('map_routes.png', dpi=150)
plt.show()
